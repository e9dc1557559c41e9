"""
Test runner task.

Runs pytest in a subprocess so the buildtypes pytest plugin is loaded, and
passes on the test split a build type may have selected through the
testSplit project property.
"""

import logging
import subprocess
import sys
from pathlib import Path

from invoke import task

from buildtypes.build.buckets import parse_test_split
from buildtypes.build.config.exceptions import ConfigException
from buildtypes.build.config.logging import bootstrap_logging

logger = logging.getLogger(__name__)

TEST_SPLIT_PROPERTY = 'testSplit'


def _resolve_split(ctx, split):
    """The --split option wins over a testSplit property set by a build type."""
    if split:
        return split
    return ctx.config.get(TEST_SPLIT_PROPERTY)


def build_pytest_command(paths, split=None, verbose=False, test_name=None):
    """
    Build the pytest command line.

    Args:
        paths: Test paths to run
        split: Optional '<index>/<count>' bucket selection
        verbose: Whether to pass -v
        test_name: Optional -k expression

    Returns:
        list: Command suitable for subprocess.run
    """
    cmd = [sys.executable, "-m", "pytest", "--tb=short", "--strict-markers"]

    if split:
        cmd.extend(["--test-split", str(parse_test_split(split))])

    if verbose:
        cmd.append("-v")

    if test_name:
        cmd.extend(["-k", test_name])

    cmd.extend(paths)
    return cmd


@task(help={
    'paths': 'Comma-separated test paths (default: tests)',
    'split': 'Run only one bucket of the test files, e.g. 2/4',
    'verbose': 'Enable verbose output',
    'test_name': 'Filter to specific test method(s) (e.g. "test_split*")'
})
def test(ctx, paths='tests', split=None, verbose=False, test_name=None):
    """
    Run tests, optionally only one bucket of the test files.

    Examples:
        inv test
        inv test --split=2/4
        bt quickCheck          # a build type setting testSplit
    """
    bootstrap_logging()

    test_paths = [path.strip() for path in paths.split(',') if path.strip()]
    valid_test_paths = []
    for path in test_paths:
        if (Path.cwd() / path).exists():
            valid_test_paths.append(path)
        else:
            logger.debug(f"Test path not found, skipping: {path}")

    if not valid_test_paths:
        print(f"❌ No valid test paths found in '{paths}'")
        sys.exit(1)

    split = _resolve_split(ctx, split)
    try:
        cmd = build_pytest_command(valid_test_paths, split, verbose, test_name)
    except ConfigException as e:
        print(e.guidance, file=sys.stderr)
        sys.exit(1)

    if split:
        print(f"🪣 Running test bucket {split}")
    if test_name:
        print(f"🎯 Filtering tests by name: {test_name}")

    logger.debug(f"🧪 Running {' '.join(cmd)}")
    result = subprocess.run(cmd, cwd=Path.cwd())

    if result.returncode == 0:
        print("✅ All tests passed!")
    else:
        print(f"❌ Tests failed with exit code {result.returncode}")
        sys.exit(result.returncode)
