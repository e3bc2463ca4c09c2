from ..config import MergeConfig
from ..core.merger import COCODatasetMerger
from ..data.loader import save_coco_file
from ..logging_config import get_logger
from .utils import display_merge_reports

logger = get_logger(__name__)


def _merge_datasets_core(config: MergeConfig):
    """
    Load, merge and write. Any CocoMergeError propagates before the output
    file is touched.
    """
    logger.info(f"Merging {len(config.coco_files)} files into {config.output_path}")
    merger = COCODatasetMerger.from_config(config)
    merged = merger.merge()
    save_coco_file(merged, config.output_path)

    display_merge_reports(merger.reports)
    return merger
