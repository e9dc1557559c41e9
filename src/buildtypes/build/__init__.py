"""
Build package for build types.

This package contains the project model, the build types plugin and the
bucket splitting used for parallel test runs.
"""

from .buckets import BucketSplit, parse_test_split, select_bucket, split_into_buckets
from .config import BuildType, apply_build_types
from .graph import BuildTypeExecutor, TaskGraph
from .plugin import BuildTypeContainer, BuildTypesPlugin
from .project import Project, ProjectTask, TaskProvider

__all__ = [
    'BucketSplit',
    'BuildType',
    'BuildTypeContainer',
    'BuildTypeExecutor',
    'BuildTypesPlugin',
    'Project',
    'ProjectTask',
    'TaskGraph',
    'TaskProvider',
    'apply_build_types',
    'parse_test_split',
    'select_bucket',
    'split_into_buckets',
]
