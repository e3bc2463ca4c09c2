from .loader import load_coco_file, load_coco_files, save_coco_file

__all__ = ["load_coco_file", "load_coco_files", "save_coco_file"]
