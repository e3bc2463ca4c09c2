from .allocator import IdAllocator, IdNamespace
from .merger import COCODatasetMerger, FileMergeReport, merge_coco_files
from .reconcilers import (
    AnnotationReconciler,
    CanonicalRegistry,
    ImageReconciler,
    resolve_image_path,
)

__all__ = [
    "IdAllocator",
    "IdNamespace",
    "COCODatasetMerger",
    "FileMergeReport",
    "merge_coco_files",
    "AnnotationReconciler",
    "CanonicalRegistry",
    "ImageReconciler",
    "resolve_image_path",
]
