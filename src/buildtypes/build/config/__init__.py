"""
Configuration for build types: models, build-types.yaml loading and errors.
"""

from .exceptions import ConfigException
from .loading import apply_build_types, find_build_types_file, load_build_types_config
from .models import BuildType, BuildTypeDefinition, BuildTypesConfig, ProjectDefinition

__all__ = [
    'BuildType',
    'BuildTypeDefinition',
    'BuildTypesConfig',
    'ConfigException',
    'ProjectDefinition',
    'apply_build_types',
    'find_build_types_file',
    'load_build_types_config',
]
