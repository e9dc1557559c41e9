"""
Tasks for inspecting build types and test buckets.
"""

import sys
from pathlib import Path

from invoke import task

from buildtypes.build.buckets import parse_test_split, split_into_buckets
from buildtypes.build.config.exceptions import ConfigException
from buildtypes.build.config.loading import load_build_types_config
from buildtypes.build.config.logging import bootstrap_logging


@task(help={
    'file': 'Path to build-types.yaml (default: ./build-types.yaml or ./config/build-types.yaml)'
})
def build_types(ctx, file=None):
    """
    Show the configured build types with their tasks and project properties.

    Examples:
        inv build-types
        inv build-types --file=ci/build-types.yaml
    """
    bootstrap_logging()
    try:
        config = load_build_types_config(file)
    except ConfigException as e:
        print(e.guidance, file=sys.stderr)
        sys.exit(1)

    if not config.build_types:
        print("⚠️  No build types configured")
        return

    print(f"{'BUILD TYPE':<20} {'TASKS':<40} {'PROPERTIES':<30}")
    print("-" * 92)
    for name, definition in config.build_types.items():
        tasks = ', '.join(definition.tasks) or '-'
        properties = ', '.join(f"{key}={value}" for key, value in definition.properties.items()) or '-'
        print(f"{name:<20} {tasks:<40} {properties:<30}")
    print("-" * 92)
    print(f"📊 {len(config.build_types)} build types from {config.source}")


@task(help={
    'count': 'Number of buckets to split the files into',
    'index': 'Only show this bucket (1-based)',
    'pattern': 'Glob for the files to split, relative to the working directory'
})
def buckets(ctx, count, index=None, pattern='tests/**/test_*.py'):
    """
    Show how test files split into buckets for parallel runs.

    Files are sorted by path first, so every worker computes the same buckets.

    Examples:
        inv buckets --count=4
        inv buckets --count=4 --index=2
    """
    bootstrap_logging()
    files = sorted(str(path) for path in Path().glob(pattern))
    if not files:
        print(f"⚠️  No files match '{pattern}'")
        return

    try:
        if index is not None:
            split = parse_test_split(f"{index}/{count}")
            selected = {split.index}
        else:
            selected = None
        all_buckets = split_into_buckets(files, int(count))
    except (ConfigException, ValueError) as e:
        print(getattr(e, 'guidance', f"❌ {e}"), file=sys.stderr)
        sys.exit(1)

    # Fewer files than buckets leaves the trailing buckets empty
    if selected is not None and split.index > len(all_buckets):
        print(f"⚠️  Bucket {split} is empty ({len(files)} files for {split.count} buckets)")
        return

    for number, bucket in enumerate(all_buckets, start=1):
        if selected is not None and number not in selected:
            continue
        print(f"🪣 Bucket {number}/{len(all_buckets)} ({len(bucket)} files)")
        for path in bucket:
            print(f"   {path}")
