"""
Exceptions raised while loading and merging COCO datasets.
"""

from typing import Any, Dict, Optional


class CocoMergeError(Exception):
    """Base exception for cocomerge."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class DatasetLoadError(CocoMergeError):
    """A COCO file could not be read, decoded or validated."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(
            f"Could not load COCO file {path}: {reason}",
            error_code="LOAD_ERROR",
            details={"path": path, "reason": reason},
        )


class ReferentialIntegrityError(CocoMergeError):
    """An entity references an id its own file never declared."""

    def __init__(
        self,
        file_path: str,
        entity: str,
        entity_id: Any,
        referenced_kind: str,
        referenced_id: Any,
    ):
        self.file_path = file_path
        self.entity = entity
        self.entity_id = entity_id
        self.referenced_kind = referenced_kind
        self.referenced_id = referenced_id
        super().__init__(
            f"{referenced_kind.capitalize()} id {referenced_id} not found for "
            f"{entity} id {entity_id} in file {file_path}",
            error_code="REFERENTIAL_INTEGRITY",
            details={
                "file": file_path,
                "entity": entity,
                "entity_id": entity_id,
                "referenced_kind": referenced_kind,
                "referenced_id": referenced_id,
            },
        )
