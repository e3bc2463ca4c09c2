from .coco_validator import COCOValidator

__all__ = ["COCOValidator"]
