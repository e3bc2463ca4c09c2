"""
Dataset statistics for COCO files.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict

from .schemas import (
    DENSE_POSE,
    IMAGE_CAPTIONING,
    KEYPOINT_DETECTION,
    OBJECT_DETECTION,
    PANOPTIC_SEGMENTATION,
    CocoFile,
)

ANNOTATION_KINDS = (
    OBJECT_DETECTION,
    KEYPOINT_DETECTION,
    PANOPTIC_SEGMENTATION,
    IMAGE_CAPTIONING,
    DENSE_POSE,
)
CATEGORY_KINDS = (OBJECT_DETECTION, PANOPTIC_SEGMENTATION, KEYPOINT_DETECTION)


@dataclass
class DatasetStats:
    images: int
    annotations: int
    categories: int
    licenses: int
    annotations_by_kind: Dict[str, int] = field(default_factory=dict)
    categories_by_kind: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_coco_file(cls, coco_file: CocoFile) -> "DatasetStats":
        annotation_counts = Counter(ann.kind for ann in coco_file.annotations)
        categories = coco_file.categories or []
        category_counts = Counter(cat.kind for cat in categories)
        return cls(
            images=len(coco_file.images),
            annotations=len(coco_file.annotations),
            categories=len(categories),
            licenses=len(coco_file.licenses or []),
            annotations_by_kind={k: annotation_counts.get(k, 0) for k in ANNOTATION_KINDS},
            categories_by_kind={k: category_counts.get(k, 0) for k in CATEGORY_KINDS},
        )


def kind_label(kind: str) -> str:
    """``object_detection`` -> ``Object Detection``"""
    return kind.replace("_", " ").title()
