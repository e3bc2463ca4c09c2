"""
Per-entity reconcilers used by the COCO dataset merger.

Each reconciler owns the state of one identifier namespace for the duration
of a merge and is fed one file at a time. Categories and licenses are
deduplicated by structural content; images and annotations are resolved by id
with the first-seen entity keeping its id.
"""

import os
from typing import Dict, Generic, Hashable, List, Sequence, Tuple, TypeVar

from ..exceptions import ReferentialIntegrityError
from ..logging_config import get_logger
from ..schemas import (
    CategorizedAnnotation,
    CocoAnnotation,
    CocoImage,
    ImageCaptioningAnnotation,
    PanopticSegmentationAnnotation,
)
from .allocator import IdNamespace

logger = get_logger(__name__)

T = TypeVar("T")


class CanonicalRegistry(Generic[T]):
    """
    Content-keyed set of canonical entities (categories or licenses).

    Entities are keyed by ``structural_key()``, which leaves the id out, so two
    entries that only differ by id collapse to one canonical entry.
    """

    def __init__(self, entity_kind: str):
        self.entity_kind = entity_kind
        self.namespace = IdNamespace()
        self._canonical: Dict[Hashable, T] = {}

    def __len__(self) -> int:
        return len(self._canonical)

    def reconcile(self, entity: T) -> int:
        """Register an entity and return the canonical id it maps to."""
        key = entity.structural_key()
        canonical = self._canonical.get(key)
        if canonical is not None:
            return canonical.id

        if entity.id in self.namespace:
            # new content reusing an id owned by another canonical entry
            canonical = entity.with_id(self.namespace.reassign())
            logger.debug(
                f"{self.entity_kind.capitalize()} id {entity.id} already taken, "
                f"reassigned to {canonical.id}"
            )
        else:
            self.namespace.accept(entity.id)
            canonical = entity
        self._canonical[key] = canonical
        return canonical.id

    def build_remap(self, entities: Sequence[T]) -> Dict[int, int]:
        """Reconcile one file's entities, returning its ``old id -> canonical id`` table."""
        remap: Dict[int, int] = {}
        for entity in entities:
            remap[entity.id] = self.reconcile(entity)
        return remap

    def canonical_entities(self) -> List[T]:
        """Canonical entities in first-seen order."""
        return list(self._canonical.values())


def resolve_image_path(
    source_path: str, file_name: str, force_absolute: bool = False
) -> str:
    """
    Resolve an image ``file_name`` against the COCO file that declared it.

    Relative names are joined onto the directory holding the source file so
    they stay valid from the current working directory.
    """
    if os.path.isabs(file_name):
        return file_name
    resolved = os.path.join(os.path.dirname(source_path), file_name)
    if force_absolute:
        resolved = os.path.abspath(resolved)
    return resolved


class ImageReconciler:
    """Places images in the output and builds per-file image id remaps."""

    def __init__(self, reassign_clashing_ids: bool = False, absolute_paths: bool = False):
        self.reassign_clashing_ids = reassign_clashing_ids
        self.absolute_paths = absolute_paths
        self.namespace = IdNamespace()
        self.images: List[CocoImage] = []
        self.dropped: List[Tuple[str, int]] = []
        self.reassigned: List[Tuple[str, int, int]] = []

    def reconcile_file(
        self,
        source_path: str,
        images: Sequence[CocoImage],
        license_id_remap: Dict[int, int],
    ) -> Dict[int, int]:
        """
        Reconcile the images of one file.

        Returns:
            ``old image id -> output image id`` for every image kept. Dropped
            images have no entry.

        Raises:
            ReferentialIntegrityError: if an image references a license its
                file does not declare.
        """
        image_id_remap: Dict[int, int] = {}
        for image in images:
            update = {
                "file_name": resolve_image_path(
                    source_path, image.file_name, self.absolute_paths
                )
            }
            if image.license is not None:
                if image.license not in license_id_remap:
                    raise ReferentialIntegrityError(
                        source_path, "image", image.id, "license", image.license
                    )
                update["license"] = license_id_remap[image.license]

            if image.id not in self.namespace:
                new_id = self.namespace.accept(image.id)
            elif self.reassign_clashing_ids:
                new_id = self.namespace.reassign()
                self.reassigned.append((source_path, image.id, new_id))
                logger.debug(
                    f"Image id {image.id} in file {source_path} reassigned to {new_id}"
                )
            else:
                logger.warning(
                    f"Image id {image.id} in file {source_path} clashes with an "
                    "existing image id. Ignoring this image."
                )
                self.dropped.append((source_path, image.id))
                continue

            update["id"] = new_id
            image_id_remap[image.id] = new_id
            self.images.append(image.model_copy(update=update))
        return image_id_remap


class AnnotationReconciler:
    """
    Places annotations in the output.

    Annotation ids and panoptic segment ids share one namespace, and clashing
    ids are always reassigned.
    """

    def __init__(self):
        self.namespace = IdNamespace()
        self.annotations: List[CocoAnnotation] = []
        self.discarded = 0

    def reconcile_file(
        self,
        source_path: str,
        annotations: Sequence[CocoAnnotation],
        image_id_remap: Dict[int, int],
        category_id_remap: Dict[int, int],
    ) -> int:
        """
        Reconcile the annotations of one file and return how many were kept.

        Annotations whose image was not kept are discarded without error.

        Raises:
            ReferentialIntegrityError: if an annotation or panoptic segment
                references a category its file does not declare.
        """
        kept = 0
        for annotation in annotations:
            new_image_id = image_id_remap.get(annotation.image_id)
            if new_image_id is None:
                self.discarded += 1
                continue

            if isinstance(annotation, PanopticSegmentationAnnotation):
                new_annotation = self._reconcile_panoptic(
                    source_path, annotation, new_image_id, category_id_remap
                )
            elif isinstance(annotation, CategorizedAnnotation):
                category_id = _remap_category(
                    source_path,
                    "annotation",
                    annotation.id,
                    annotation.category_id,
                    category_id_remap,
                )
                new_annotation = annotation.model_copy(
                    update={
                        "id": self.namespace.resolve(annotation.id),
                        "image_id": new_image_id,
                        "category_id": category_id,
                    }
                )
            elif isinstance(annotation, ImageCaptioningAnnotation):
                new_annotation = annotation.model_copy(
                    update={
                        "id": self.namespace.resolve(annotation.id),
                        "image_id": new_image_id,
                    }
                )
            else:
                raise TypeError(f"Unsupported annotation type: {type(annotation)}")

            self.annotations.append(new_annotation)
            kept += 1
        return kept

    def _reconcile_panoptic(
        self,
        source_path: str,
        annotation: PanopticSegmentationAnnotation,
        new_image_id: int,
        category_id_remap: Dict[int, int],
    ) -> PanopticSegmentationAnnotation:
        segments = []
        for segment in annotation.segments_info:
            category_id = _remap_category(
                source_path,
                "segment info",
                segment.id,
                segment.category_id,
                category_id_remap,
            )
            segments.append(
                segment.model_copy(
                    update={
                        "id": self.namespace.resolve(segment.id),
                        "category_id": category_id,
                    }
                )
            )
        return annotation.model_copy(
            update={"image_id": new_image_id, "segments_info": segments}
        )


def _remap_category(
    source_path: str,
    entity: str,
    entity_id: int,
    category_id: int,
    category_id_remap: Dict[int, int],
) -> int:
    if category_id not in category_id_remap:
        raise ReferentialIntegrityError(
            source_path, entity, entity_id, "category", category_id
        )
    return category_id_remap[category_id]
