"""
Pytest plugin that runs one bucket of the test files.

With --test-split=2/4 (or TEST_SPLIT=2/4) the collected test files are
sorted, split into 4 contiguous buckets, and only the tests in the second
bucket run. Running every index from 1 to 4, for example on 4 CI workers,
runs each test file exactly once.
"""

import os
from typing import List, Optional, Tuple

import pytest

from buildtypes.build.buckets import BucketSplit, parse_test_split, select_bucket
from buildtypes.build.config.exceptions import ConfigException

TEST_SPLIT_ENV_VAR = 'TEST_SPLIT'

_test_split_key = pytest.StashKey[Optional[BucketSplit]]()


def pytest_addoption(parser):
    """Add custom command line options for pytest."""
    group = parser.getgroup("buildtypes")
    group.addoption(
        "--test-split",
        action="store",
        default=None,
        help=f"Run only bucket <index>/<count> of the test files, e.g. 2/4 (env: {TEST_SPLIT_ENV_VAR})"
    )


def get_test_split(config) -> Optional[BucketSplit]:
    """The requested split from --test-split or TEST_SPLIT, or None."""
    value = config.getoption("--test-split") or os.environ.get(TEST_SPLIT_ENV_VAR)
    if not value:
        return None
    try:
        return parse_test_split(value)
    except ConfigException as e:
        raise pytest.UsageError(e.guidance) from e


def pytest_configure(config):
    config.stash[_test_split_key] = get_test_split(config)


def pytest_report_header(config):
    split = config.stash.get(_test_split_key, None)
    if split is not None:
        return f"test split: bucket {split}"
    return None


def _item_file(item) -> str:
    return str(item.path)


def split_items(items: List, split: BucketSplit) -> Tuple[List, List]:
    """
    Partition collected items into (selected, deselected) by test file.

    Items keep their collection order; only whole files move between buckets.
    """
    files = sorted({_item_file(item) for item in items})
    selected_files = set(select_bucket(files, split))

    selected, deselected = [], []
    for item in items:
        if _item_file(item) in selected_files:
            selected.append(item)
        else:
            deselected.append(item)
    return selected, deselected


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config, items):
    """Keep only the tests whose file falls in the requested bucket."""
    split = config.stash.get(_test_split_key, None)
    if split is None:
        return

    selected, deselected = split_items(items, split)
    if deselected:
        config.hook.pytest_deselected(items=deselected)
    items[:] = selected
