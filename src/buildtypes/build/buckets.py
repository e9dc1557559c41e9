"""
Splitting ordered work (usually test files) into buckets for parallel runs.
"""
import logging
import re
from typing import List, Sequence, TypeVar

from pydantic import BaseModel

from buildtypes.build.config.exceptions import InvalidBucketCountException, InvalidTestSplitException

logger = logging.getLogger(__name__)

T = TypeVar('T')

_SPLIT_PATTERN = re.compile(r'^\s*(\d+)\s*/\s*(\d+)\s*$')


def split_into_buckets(items: Sequence[T], number_of_splits: int) -> List[List[T]]:
    """
    Split items into contiguous buckets whose sizes differ by at most one.

    The remainder goes to the earliest buckets, so 100 items in 7 buckets
    come out as 15, 15, 14, 14, 14, 14, 14. Concatenating the buckets in
    order gives back the original items.

    When there are no more items than buckets, every item gets its own
    bucket and no empty buckets are returned.

    Raises:
        InvalidBucketCountException: If number_of_splits is less than 1
    """
    if number_of_splits < 1:
        raise InvalidBucketCountException(
            f"Number of buckets must be positive, got {number_of_splits}",
            count=number_of_splits
        )

    items = list(items)
    if len(items) <= number_of_splits:
        return [[item] for item in items]

    size, remainder = divmod(len(items), number_of_splits)
    buckets = []
    start = 0
    for index in range(number_of_splits):
        end = start + size + (1 if index < remainder else 0)
        buckets.append(items[start:end])
        start = end

    logger.debug(f"Split {len(items)} items into {number_of_splits} buckets of {size}-{size + (1 if remainder else 0)}")
    return buckets


class BucketSplit(BaseModel):
    """One bucket out of a number of buckets, 1-based (e.g. 2/4)."""

    index: int
    count: int

    def __str__(self) -> str:
        return f"{self.index}/{self.count}"


def parse_test_split(value: str) -> BucketSplit:
    """Parse '<index>/<count>' into a BucketSplit."""
    match = _SPLIT_PATTERN.match(str(value))
    if not match:
        raise InvalidTestSplitException(f"Test split must look like <index>/<count>, got '{value}'", value=value)
    index, count = int(match.group(1)), int(match.group(2))
    if count < 1 or not 1 <= index <= count:
        raise InvalidTestSplitException(f"Split index must be between 1 and {count}", value=value)
    return BucketSplit(index=index, count=count)


def select_bucket(items: Sequence[T], split: BucketSplit) -> List[T]:
    """Return the items of bucket split.index, or nothing if there is no such bucket."""
    buckets = split_into_buckets(items, split.count)
    if split.index > len(buckets):
        return []
    return buckets[split.index - 1]
