"""
Build types for invoke task collections.

Declares mutually exclusive build configurations (quickCheck, fullCheck, ...)
over a tree of invoke collections, and splits test files into buckets for
parallel test runs.
"""

from .build import (
    BuildType,
    BuildTypeContainer,
    BuildTypeExecutor,
    BuildTypesPlugin,
    Project,
    apply_build_types,
    parse_test_split,
    select_bucket,
    split_into_buckets,
)

__version__ = '0.1.0'

__all__ = [
    'BuildType',
    'BuildTypeContainer',
    'BuildTypeExecutor',
    'BuildTypesPlugin',
    'Project',
    'apply_build_types',
    'parse_test_split',
    'select_bucket',
    'split_into_buckets',
]
