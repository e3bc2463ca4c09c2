"""
cocomerge - COCO dataset merging toolkit

Combines independently authored COCO annotation files into a single dataset,
reconciling image, annotation, category and license identifiers.
"""

__version__ = "0.1.0"
__author__ = "cocomerge contributors"
__description__ = "Merge COCO datasets without id collisions"
