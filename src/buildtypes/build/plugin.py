"""
Build types plugin.

A build type (e.g. quickCheck, fullCheck) becomes a task in every
subproject. Running that task runs the build type's tasks that exist in the
subproject and applies the build type's project properties there. Only one
build type may take part in a single invocation.
"""

import logging
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional

from buildtypes.build.config.exceptions import (
    DuplicateBuildTypeException,
    InvalidBuildTypeNameException,
    MultipleActiveBuildTypesException,
    NotRootProjectException,
    UnknownBuildTypeException,
)
from buildtypes.build.config.models import BuildType
from buildtypes.build.project import PATH_SEPARATOR, Project, ProjectTask

logger = logging.getLogger(__name__)

BUILD_TYPE_GROUP = "Build Type"
EXTENSION_NAME = "buildTypes"


class BuildTypeContainer:
    """Named collection of build types."""

    def __init__(self):
        self._build_types: Dict[str, BuildType] = {}
        self._actions: List[Callable[[BuildType], None]] = []

    def create(self, name: str, tasks: Iterable[str] = (),
               properties: Optional[Mapping] = None) -> BuildType:
        """
        Create a build type and hand it to every action registered with all().

        Raises:
            InvalidBuildTypeNameException: If the name cannot be a task name
            DuplicateBuildTypeException: If the name is already taken
        """
        if not name or '.' in name or PATH_SEPARATOR in name:
            raise InvalidBuildTypeNameException(f"Invalid build type name '{name}'", build_type=name)
        if name in self._build_types:
            raise DuplicateBuildTypeException(f"Build type '{name}' already exists", build_type=name)

        build_type = BuildType(name=name, task_names=list(tasks), project_properties=dict(properties or {}))
        self._build_types[name] = build_type
        for action in list(self._actions):
            action(build_type)
        return build_type

    def all(self, action: Callable[[BuildType], None]) -> None:
        """Run action for every build type, now and as they are created."""
        self._actions.append(action)
        for build_type in list(self._build_types.values()):
            action(build_type)

    def find_by_name(self, name: str) -> Optional[BuildType]:
        return self._build_types.get(name)

    @property
    def names(self) -> List[str]:
        return list(self._build_types)

    @property
    def active(self) -> List[BuildType]:
        return [build_type for build_type in self if build_type.active]

    def __getitem__(self, name: str) -> BuildType:
        if name not in self._build_types:
            raise UnknownBuildTypeException(
                f"Build type '{name}' not found", build_type=name, known=self.names
            )
        return self._build_types[name]

    def __contains__(self, name: str) -> bool:
        return name in self._build_types

    def __iter__(self) -> Iterator[BuildType]:
        return iter(list(self._build_types.values()))

    def __len__(self) -> int:
        return len(self._build_types)


class BuildTypesPlugin:
    """Registers build types on a root project."""

    def apply(self, project: Project) -> BuildTypeContainer:
        if not project.is_root:
            raise NotRootProjectException(
                f"Build types can only be applied to the root project, not {project.path}",
                project_path=project.path
            )

        build_types = BuildTypeContainer()
        project.extensions[EXTENSION_NAME] = build_types
        build_types.all(lambda build_type: _register_build_type(project, build_type))

        # Only allow one build type to be used in a build
        project.task_graph.when_ready(lambda graph: check_single_active(build_types))
        return build_types


def check_single_active(build_types: BuildTypeContainer) -> None:
    active = [build_type.name for build_type in build_types.active]
    if len(active) > 1:
        raise MultipleActiveBuildTypesException(
            f"You can only have one active build type at a time. Active: {active}",
            active=active
        )


def _register_build_type(root: Project, build_type: BuildType) -> None:
    build_type.active = False

    providers = []
    for subproject in root.subprojects:
        provider = subproject.tasks.register(build_type.name)
        provider.configure(lambda task, build_type=build_type: _configure_build_type_task(task, build_type))
        providers.append(provider)

    # Running the build type from the root selects it in every subproject
    if build_type.name not in root.tasks and root.collection.transform(build_type.name) not in root.collection.collections:
        selector = root.tasks.register(build_type.name)
        selector.configure(lambda task: _configure_selector_task(task, build_type, providers))

    logger.debug(f"Registered build type '{build_type.name}' in {len(providers)} subprojects")


def _configure_build_type_task(task: ProjectTask, build_type: BuildType) -> None:
    project = task.project
    task.group = BUILD_TYPE_GROUP
    task.description = f"Run {build_type.name} build type"
    task.depends_on.append(lambda: _existing_task_names(project, build_type))

    # Realizing the task is taken to mean it will be executed
    build_type.active = True

    build_type.finalize_properties()
    for name, value in build_type.project_properties.items():
        project.set_or_create_property(name, value)


def _configure_selector_task(task: ProjectTask, build_type: BuildType, providers: list) -> None:
    task.group = BUILD_TYPE_GROUP
    task.description = f"Run {build_type.name} build type in all subprojects"
    task.depends_on.extend(providers)


def _existing_task_names(project: Project, build_type: BuildType) -> List[str]:
    """The build type's task names that apply to this project."""
    selected = []
    for name in build_type.task_names:
        if name.startswith(PATH_SEPARATOR) or name in project.tasks:
            selected.append(name)
        else:
            logger.debug(f"Skipping task '{name}' requested by build type {build_type.name} "
                         f"as it does not exist in {project.path}")
    return selected
