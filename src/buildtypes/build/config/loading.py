"""
Loading build types from build-types.yaml and applying them to an invoke namespace.
"""
import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from invoke import Collection
from pydantic import ValidationError

from .exceptions import BuildTypesFileException
from .models import BuildTypesConfig

logger = logging.getLogger(__name__)

BUILD_TYPES_FILENAME = 'build-types.yaml'


def find_build_types_file(root: Path = None) -> Optional[Path]:
    """
    Find build-types.yaml in the working directory or its config/ subdirectory.

    Args:
        root: Directory to search (defaults to current working directory)

    Returns:
        Path to the file, or None if there is none
    """
    if root is None:
        root = Path.cwd()

    for candidate in (root / BUILD_TYPES_FILENAME, root / 'config' / BUILD_TYPES_FILENAME):
        if candidate.exists():
            logger.debug(f"Found build types file at {candidate}")
            return candidate
    return None


def load_build_types_config(config_path: Union[str, Path, None] = None) -> BuildTypesConfig:
    """
    Load and validate build-types.yaml.

    Args:
        config_path: Explicit path; when omitted the file is searched for and
            an empty configuration is returned if none exists

    Raises:
        BuildTypesFileException: If an explicit path is missing or the file is invalid
    """
    if config_path is None:
        path = find_build_types_file()
        if path is None:
            logger.debug(f"No {BUILD_TYPES_FILENAME} found, no build types configured")
            return BuildTypesConfig()
    else:
        path = Path(config_path)
        if not path.exists():
            raise BuildTypesFileException(f"File not found: {path}", config_file=str(path))

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise BuildTypesFileException(f"Invalid YAML: {e}", config_file=str(path)) from e

    if not isinstance(data, dict):
        raise BuildTypesFileException("Top level must be a mapping", config_file=str(path))

    try:
        config = BuildTypesConfig.model_validate(data)
    except ValidationError as e:
        raise BuildTypesFileException(str(e), config_file=str(path)) from e

    config.source = str(path)
    logger.debug(f"Loaded {len(config.build_types)} build types from {path}")
    return config


def configure_build_types(project, build_types, config: BuildTypesConfig) -> None:
    """Declare the configured project properties and create the configured build types."""
    for project_path, definition in config.projects.items():
        target = project.find_project(project_path)
        for name, value in definition.properties.items():
            target.declare_property(name, value)

    for name, definition in config.build_types.items():
        build_types.create(name, tasks=definition.tasks, properties=definition.properties)


def apply_build_types(namespace: Collection, config_path: Union[str, Path, None] = None):
    """
    Apply build types to the root invoke namespace.

    Builds the project tree from the namespace, applies the build types plugin
    and creates the build types found in build-types.yaml. More build types can
    be created on the returned container.

    Example:
        ns = Collection(Collection.from_module(core, name='core'))
        build_types = apply_build_types(ns)
        build_types.create('quickCheck', tasks=['lint', 'test'])
    """
    from buildtypes.build.plugin import BuildTypesPlugin
    from buildtypes.build.project import Project

    project = Project.from_collection(namespace)
    build_types = BuildTypesPlugin().apply(project)
    configure_build_types(project, build_types, load_build_types_config(config_path))
    return build_types
