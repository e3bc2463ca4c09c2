"""
Shared builders and fixtures for cocomerge tests.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest


def make_synthetic_coco_dataset(
    dataset_id: int,
    num_images: int,
    category_names: List[str],
    image_offset: int = 0,
    annotation_offset: int = 0,
    category_offset: int = 0,
    supercategory: str = "animal",
    licenses: Optional[List[Dict[str, Any]]] = None,
    image_license: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Generate a synthetic object detection COCO dataset.

    Every image gets one annotation per category.
    """
    categories = [
        {
            "id": i + 1 + category_offset,
            "name": name,
            "supercategory": supercategory,
        }
        for i, name in enumerate(category_names)
    ]
    images = []
    annotations = []
    for i in range(num_images):
        img_id = i + 1 + image_offset
        image = {
            "id": img_id,
            "file_name": f"images/image_{dataset_id}_{i}.jpg",
            "width": 640,
            "height": 480,
        }
        if image_license is not None:
            image["license"] = image_license
        images.append(image)
        for j, cat in enumerate(categories):
            annotations.append(
                {
                    "id": annotation_offset + i * len(categories) + j + 1,
                    "image_id": img_id,
                    "category_id": cat["id"],
                    "segmentation": [[10, 10, 110, 10, 110, 110]],
                    "bbox": [10, 10, 100, 100],
                    "area": 10000,
                    "iscrowd": 0,
                }
            )
    data = {
        "info": {"description": f"Synthetic dataset {dataset_id}"},
        "images": images,
        "annotations": annotations,
        "categories": copy.deepcopy(categories),
    }
    if licenses is not None:
        data["licenses"] = copy.deepcopy(licenses)
    return data


def make_panoptic_dataset(
    image_id: int, segment_ids: List[int], category_id: int = 1
) -> Dict[str, Any]:
    """One image with one panoptic annotation carrying the given segment ids."""
    return {
        "images": [
            {
                "id": image_id,
                "file_name": f"/data/panoptic/{image_id}.jpg",
                "width": 320,
                "height": 240,
            }
        ],
        "annotations": [
            {
                "image_id": image_id,
                "file_name": f"{image_id}.png",
                "segments_info": [
                    {
                        "id": segment_id,
                        "category_id": category_id,
                        "area": 50,
                        "bbox": [0, 0, 10, 5],
                        "iscrowd": 0,
                    }
                    for segment_id in segment_ids
                ],
            }
        ],
        "categories": [
            {
                "id": category_id,
                "name": "person",
                "supercategory": "human",
                "isthing": 1,
                "color": [220, 20, 60],
            }
        ],
    }


def write_coco(directory: Path, name: str, data: Dict[str, Any]) -> Path:
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def coco_writer(tmp_path):
    """Write COCO dicts into the test's temporary directory."""

    def _write(name: str, data: Dict[str, Any]) -> Path:
        return write_coco(tmp_path, name, data)

    return _write


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces root handlers; put the originals back."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
