"""
Pydantic models for build types and the build-types.yaml file.
"""
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from .exceptions import FinalizedValueException


class BuildType(BaseModel):
    """A named, mutually exclusive build configuration."""
    name: str
    task_names: List[str] = []
    project_properties: Dict[str, Any] = {}
    active: bool = False

    _finalized: bool = PrivateAttr(default=False)

    def tasks(self, *names: str) -> 'BuildType':
        """Replace the tasks this build type runs in each subproject."""
        self.task_names = list(names)
        return self

    def properties(self, values: Optional[Mapping[str, Any]] = None, **kwargs) -> 'BuildType':
        """Add project properties applied to every subproject when the build type runs."""
        if self._finalized:
            raise FinalizedValueException(
                f"The project properties of build type '{self.name}' are final and cannot be changed",
                build_type=self.name
            )
        self.project_properties = {**self.project_properties, **dict(values or {}), **kwargs}
        return self

    def finalize_properties(self) -> None:
        self._finalized = True

    @property
    def finalized(self) -> bool:
        return self._finalized

    def __str__(self) -> str:
        return self.name


class BuildTypeDefinition(BaseModel):
    """A build type as declared in build-types.yaml."""
    tasks: List[str] = []
    properties: Dict[str, Any] = {}

    @field_validator('tasks', mode='before')
    @classmethod
    def _tasks_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator('properties', mode='before')
    @classmethod
    def _properties_dict(cls, value):
        return {} if value is None else value


class ProjectDefinition(BaseModel):
    """Project-level properties declared in build-types.yaml."""
    properties: Dict[str, Any] = {}


class BuildTypesConfig(BaseModel):
    """Contents of build-types.yaml."""
    model_config = ConfigDict(populate_by_name=True)

    build_types: Dict[str, BuildTypeDefinition] = Field(default={}, alias='buildTypes')
    projects: Dict[str, ProjectDefinition] = {}
    source: Optional[str] = None

    @field_validator('build_types', 'projects', mode='before')
    @classmethod
    def _empty_entries(cls, value):
        # "quickCheck:" with nothing under it parses as None
        if value is None:
            return {}
        if isinstance(value, dict):
            return {key: ({} if entry is None else entry) for key, entry in value.items()}
        return value
