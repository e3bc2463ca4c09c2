from .coco import (
    DENSE_POSE,
    IMAGE_CAPTIONING,
    KEYPOINT_DETECTION,
    OBJECT_DETECTION,
    PANOPTIC_SEGMENTATION,
    CategorizedAnnotation,
    CocoAnnotation,
    CocoCategory,
    CocoFile,
    CocoImage,
    CocoInfo,
    CocoLicense,
    CocoRLE,
    DensePoseAnnotation,
    ImageCaptioningAnnotation,
    KeypointDetectionAnnotation,
    KeypointDetectionCategory,
    ObjectDetectionAnnotation,
    ObjectDetectionCategory,
    PanopticSegmentationAnnotation,
    PanopticSegmentationCategory,
    PanopticSegmentInfo,
    annotation_kind,
    category_kind,
)

__all__ = [
    "DENSE_POSE",
    "IMAGE_CAPTIONING",
    "KEYPOINT_DETECTION",
    "OBJECT_DETECTION",
    "PANOPTIC_SEGMENTATION",
    "CategorizedAnnotation",
    "CocoAnnotation",
    "CocoCategory",
    "CocoFile",
    "CocoImage",
    "CocoInfo",
    "CocoLicense",
    "CocoRLE",
    "DensePoseAnnotation",
    "ImageCaptioningAnnotation",
    "KeypointDetectionAnnotation",
    "KeypointDetectionCategory",
    "ObjectDetectionAnnotation",
    "ObjectDetectionCategory",
    "PanopticSegmentationAnnotation",
    "PanopticSegmentationCategory",
    "PanopticSegmentInfo",
    "annotation_kind",
    "category_kind",
]
