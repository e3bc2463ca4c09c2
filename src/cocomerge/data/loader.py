import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Union

from pydantic import ValidationError
from tqdm import tqdm

from ..exceptions import DatasetLoadError
from ..logging_config import get_logger
from ..schemas import CocoFile

logger = get_logger(__name__)

PathLike = Union[str, Path]


def load_coco_file(path: PathLike) -> CocoFile:
    """
    Load and validate a single COCO JSON file.

    Raises:
        DatasetLoadError: if the file cannot be read, is not valid JSON or does
            not match the COCO schema.
    """
    path = str(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise DatasetLoadError(path, f"could not read file ({e})") from e
    except json.JSONDecodeError as e:
        raise DatasetLoadError(path, f"invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise DatasetLoadError(path, "root element must be a JSON object")

    try:
        coco_file = CocoFile.from_dict(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise DatasetLoadError(
            path, f"{e.error_count()} schema error(s), first at {location}: {first['msg']}"
        ) from e

    logger.debug(
        f"Loaded {path}: {len(coco_file.images)} images, "
        f"{len(coco_file.annotations)} annotations"
    )
    return coco_file


def load_coco_files(
    paths: Sequence[PathLike], num_workers: Optional[int] = None
) -> List[CocoFile]:
    """
    Load several COCO files concurrently, returning them in input order.

    Loading has no cross-file dependency, so files are parsed in a thread pool.
    The first failing file (in input order) aborts the whole load.
    """
    if not paths:
        return []
    num_workers = num_workers or min(len(paths), 8)
    with ThreadPoolExecutor(max_workers=num_workers) as executor:
        return list(
            tqdm(
                executor.map(load_coco_file, paths),
                total=len(paths),
                desc="Loading COCO files",
                disable=len(paths) < 2,
            )
        )


def save_coco_file(coco_file: CocoFile, path: PathLike, indent: int = 2) -> None:
    """Write a COCO file as pretty-printed JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(coco_file.to_dict(), f, indent=indent, ensure_ascii=False)
    logger.info(f"Saved COCO file to {path}")
