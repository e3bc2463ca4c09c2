"""
COCO Dataset Merger

Merges several COCO files into one dataset. Files are processed strictly in
input order, and within each file categories, licenses, images and annotations
are reconciled in that order because each stage consumes the id remap table
built by the previous one. Earlier files win id collisions.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..config import MergeConfig
from ..data.loader import load_coco_files
from ..logging_config import get_logger
from ..schemas import CocoFile, CocoInfo
from .reconcilers import AnnotationReconciler, CanonicalRegistry, ImageReconciler

logger = get_logger(__name__)


@dataclass
class FileMergeReport:
    """What happened to one input file during the merge."""

    source_path: str
    images_in: int
    images_kept: int
    annotations_in: int
    annotations_kept: int
    categories_in: int
    licenses_in: int

    @property
    def images_dropped(self) -> int:
        return self.images_in - self.images_kept

    @property
    def annotations_discarded(self) -> int:
        return self.annotations_in - self.annotations_kept


class COCODatasetMerger:
    """
    Merges COCO files into a unified dataset.
    - Deduplicates categories and licenses by content, remapping their ids
    - Keeps image ids unless they clash; clashing images are dropped or reassigned
    - Keeps annotation and panoptic segment ids unless they clash, in one shared namespace
    """

    def __init__(
        self,
        sources: Sequence[Tuple[str, CocoFile]],
        reassign_clashing_ids: bool = False,
        version_string: str = "1.0.0",
        absolute_paths: bool = False,
    ):
        """
        Args:
            sources: ``(source path, loaded file)`` pairs in priority order. The
                path is used to resolve relative image paths and in messages.
            reassign_clashing_ids: give clashing images a fresh id instead of
                dropping them.
            version_string: version written into the merged ``info`` block.
            absolute_paths: force absolute image file names in the output.
        """
        self.sources = [(str(path), coco_file) for path, coco_file in sources]
        self.version_string = version_string
        self.categories = CanonicalRegistry("category")
        self.licenses = CanonicalRegistry("license")
        self.images = ImageReconciler(
            reassign_clashing_ids=reassign_clashing_ids, absolute_paths=absolute_paths
        )
        self.annotations = AnnotationReconciler()
        self.reports: List[FileMergeReport] = []
        self._merged: Optional[CocoFile] = None

    @classmethod
    def from_config(cls, config: MergeConfig) -> "COCODatasetMerger":
        """Load every file named by the config and build a merger for them."""
        coco_files = load_coco_files(config.coco_files)
        return cls(
            list(zip(config.coco_files, coco_files)),
            reassign_clashing_ids=config.reassign_clashing_ids,
            version_string=config.version_string,
            absolute_paths=config.absolute_paths,
        )

    def merge(self) -> CocoFile:
        """
        Merge all sources into a single COCO file.

        The merge runs once; later calls return the same result.

        Raises:
            ReferentialIntegrityError: if a file references a category or
                license it does not declare.
        """
        if self._merged is not None:
            return self._merged

        for source_path, coco_file in self.sources:
            logger.info(f"Merging {source_path}")
            self.reports.append(self._merge_file(source_path, coco_file))

        self._merged = self._assemble()
        logger.info(
            f"Merged {len(self.sources)} files: {len(self._merged.images)} images, "
            f"{len(self._merged.annotations)} annotations, "
            f"{len(self.categories)} categories, {len(self.licenses)} licenses"
        )
        return self._merged

    def _merge_file(self, source_path: str, coco_file: CocoFile) -> FileMergeReport:
        categories = coco_file.categories or []
        licenses = coco_file.licenses or []

        category_id_remap = self.categories.build_remap(categories)
        license_id_remap = self.licenses.build_remap(licenses)
        image_id_remap = self.images.reconcile_file(
            source_path, coco_file.images, license_id_remap
        )
        annotations_kept = self.annotations.reconcile_file(
            source_path, coco_file.annotations, image_id_remap, category_id_remap
        )

        report = FileMergeReport(
            source_path=source_path,
            images_in=len(coco_file.images),
            images_kept=len(image_id_remap),
            annotations_in=len(coco_file.annotations),
            annotations_kept=annotations_kept,
            categories_in=len(categories),
            licenses_in=len(licenses),
        )
        logger.debug(f"{source_path}: {report}")
        return report

    def _assemble(self) -> CocoFile:
        return CocoFile(
            info=CocoInfo.fresh(self.version_string),
            licenses=self.licenses.canonical_entities(),
            categories=self.categories.canonical_entities(),
            images=self.images.images,
            annotations=self.annotations.annotations,
        )


def merge_coco_files(
    sources: Sequence[Tuple[str, CocoFile]],
    reassign_clashing_ids: bool = False,
    version_string: str = "1.0.0",
    absolute_paths: bool = False,
) -> CocoFile:
    """Merge already loaded COCO files. See :class:`COCODatasetMerger`."""
    return COCODatasetMerger(
        sources,
        reassign_clashing_ids=reassign_clashing_ids,
        version_string=version_string,
        absolute_paths=absolute_paths,
    ).merge()
