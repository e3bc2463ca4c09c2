from collections import Counter
from typing import Any, Dict, Iterable, List, Tuple

from ..schemas import (
    CategorizedAnnotation,
    CocoFile,
    PanopticSegmentationAnnotation,
)


class COCOValidator:
    """
    Checks the referential integrity of a loaded COCO file.

    These are the invariants a merged dataset must satisfy: ids are unique
    within each namespace (annotation ids and panoptic segment ids count as one
    namespace) and every reference resolves to a declared entity.
    """

    def __init__(self, coco_file: CocoFile, source_path: str = "<memory>"):
        """
        Args:
            coco_file: Loaded COCO file to check.
            source_path: Name used in the summary.
        """
        self.coco_file = coco_file
        self.source_path = source_path
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate(self) -> Tuple[bool, List[str], List[str]]:
        """
        Run all checks.

        Returns:
            Tuple[bool, List[str], List[str]]: (is_valid, errors, warnings)
        """
        self.errors = []
        self.warnings = []

        self._validate_unique_ids()
        self._validate_image_references()
        self._validate_category_references()
        self._validate_license_references()
        self._validate_duplicate_content()

        return len(self.errors) == 0, self.errors, self.warnings

    def _check_unique(self, kind: str, ids: Iterable[int]):
        for entity_id, count in Counter(ids).items():
            if count > 1:
                self.errors.append(f"Duplicate {kind} ID: {entity_id} ({count} times)")

    def _annotation_ids(self) -> List[int]:
        ids = []
        for ann in self.coco_file.annotations:
            if isinstance(ann, PanopticSegmentationAnnotation):
                ids.extend(segment.id for segment in ann.segments_info)
            else:
                ids.append(ann.id)
        return ids

    def _validate_unique_ids(self):
        self._check_unique("image", (img.id for img in self.coco_file.images))
        self._check_unique(
            "category", (cat.id for cat in self.coco_file.categories or [])
        )
        self._check_unique(
            "license", (lic.id for lic in self.coco_file.licenses or [])
        )
        self._check_unique("annotation/segment", self._annotation_ids())

    def _validate_image_references(self):
        image_ids = {img.id for img in self.coco_file.images}
        for i, ann in enumerate(self.coco_file.annotations):
            if ann.image_id not in image_ids:
                self.errors.append(
                    f"Annotation {i} references non-existent image ID: {ann.image_id}"
                )

    def _validate_category_references(self):
        category_ids = {cat.id for cat in self.coco_file.categories or []}
        for i, ann in enumerate(self.coco_file.annotations):
            if isinstance(ann, PanopticSegmentationAnnotation):
                for segment in ann.segments_info:
                    if segment.category_id not in category_ids:
                        self.errors.append(
                            f"Segment {segment.id} of annotation {i} references "
                            f"non-existent category ID: {segment.category_id}"
                        )
            elif isinstance(ann, CategorizedAnnotation):
                if ann.category_id not in category_ids:
                    self.errors.append(
                        f"Annotation {i} references non-existent category ID: "
                        f"{ann.category_id}"
                    )

    def _validate_license_references(self):
        license_ids = {lic.id for lic in self.coco_file.licenses or []}
        for img in self.coco_file.images:
            if img.license is not None and img.license not in license_ids:
                self.errors.append(
                    f"Image {img.id} references non-existent license ID: {img.license}"
                )

    def _validate_duplicate_content(self):
        """Structurally identical categories/licenses are legal but suspicious."""
        for kind, entities in (
            ("category", self.coco_file.categories or []),
            ("license", self.coco_file.licenses or []),
        ):
            seen: Dict[Any, int] = {}
            for entity in entities:
                key = entity.structural_key()
                if key in seen:
                    self.warnings.append(
                        f"{kind.capitalize()} {entity.id} duplicates {kind} {seen[key]}"
                    )
                else:
                    seen[key] = entity.id

    def get_summary(self) -> Dict[str, Any]:
        """
        Get a summary of the COCO file.

        Returns:
            Dict[str, Any]: Summary information
        """
        is_valid, errors, warnings = self.validate()
        return {
            "file_path": self.source_path,
            "is_valid": is_valid,
            "error_count": len(errors),
            "warning_count": len(warnings),
            "image_count": len(self.coco_file.images),
            "annotation_count": len(self.coco_file.annotations),
            "category_count": len(self.coco_file.categories or []),
            "license_count": len(self.coco_file.licenses or []),
        }
