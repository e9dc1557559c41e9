"""
Project model over invoke collections.

A project is an invoke Collection; nested collections are its subprojects.
Tasks can be registered lazily so that their configuration only runs once
the task is about to become part of an executed task graph.
"""

import logging
import weakref
from typing import Any, Callable, Dict, List, Optional

from invoke import Call, Collection, Task

from buildtypes.build.config.exceptions import (
    DuplicateTaskException,
    UnknownProjectException,
    UnknownTaskException,
)
from buildtypes.build.graph import TaskGraph

logger = logging.getLogger(__name__)

PATH_SEPARATOR = ':'

# Root projects by id() of their invoke collection
_root_projects = weakref.WeakValueDictionary()


def _lifecycle_body(name: str):
    """Create a no-op task body for tasks that only aggregate their dependencies."""
    def run(ctx):
        logger.debug(f"Lifecycle task '{name}' complete")
    return run


class ProjectTask(Task):
    """An invoke task owned by a single project.

    Same-named tasks in different projects share a body, which invoke would
    treat as equal; a project task is only ever equal to itself.
    """

    def __init__(self, body, name: str, project: 'Project'):
        super().__init__(body, name=name)
        self.project = project
        self.provider: Optional['TaskProvider'] = None
        self.group: Optional[str] = None
        self.depends_on: List[Any] = []

    __eq__ = object.__eq__
    __hash__ = object.__hash__

    @property
    def description(self) -> Optional[str]:
        return self.__doc__

    @description.setter
    def description(self, value: str):
        # invoke shows the docstring in --list
        self.__doc__ = value

    @property
    def path(self) -> str:
        return self.project.task_path(self.name)

    def __repr__(self):
        return f"<ProjectTask {self.path!r}>"


class TaskProvider:
    """Handle to a lazily configured task."""

    def __init__(self, task: ProjectTask):
        self.task = task
        self.realized = False
        self._actions: List[Callable[[ProjectTask], None]] = []

    @property
    def name(self) -> str:
        return self.task.name

    def configure(self, action: Callable[[ProjectTask], None]) -> 'TaskProvider':
        """Queue a configuration action, or run it now if the task is already realized."""
        if self.realized:
            action(self.task)
        else:
            self._actions.append(action)
        return self

    def get(self) -> ProjectTask:
        """Realize the task: run queued configuration and resolve its dependencies."""
        if not self.realized:
            self.realized = True
            logger.debug(f"Realizing task {self.task.path}")
            actions, self._actions = self._actions, []
            for action in actions:
                action(self.task)
            self.task.pre = self.task.project.resolve_dependencies(self.task.depends_on)
        return self.task


class TaskContainer:
    """The tasks of one project."""

    def __init__(self, project: 'Project'):
        self._project = project
        self._providers: Dict[str, TaskProvider] = {}

    @property
    def _collection(self) -> Collection:
        return self._project.collection

    @property
    def names(self) -> List[str]:
        return list(self._collection.tasks.keys())

    def find_by_name(self, name: str) -> Optional[Task]:
        return self._collection.tasks.get(self._collection.transform(name))

    def find_provider(self, name: str) -> Optional[TaskProvider]:
        return self._providers.get(self._collection.transform(name))

    def register(self, name: str, body=None) -> TaskProvider:
        """
        Register a task without configuring it.

        Raises:
            DuplicateTaskException: If the project already has a task or
                subproject with this name
        """
        key = self._collection.transform(name)
        if key in self._collection.tasks or key in self._collection.collections:
            raise DuplicateTaskException(
                f"Cannot add task '{name}' as a task with that name already exists in {self._project.path}",
                task_path=self._project.task_path(name),
                project_path=self._project.path
            )

        task = ProjectTask(body or _lifecycle_body(name), name=name, project=self._project)
        self._collection.add_task(task, name=name)
        provider = TaskProvider(task)
        task.provider = provider
        self._providers[key] = provider
        logger.debug(f"Registered task {task.path}")
        return provider

    def __contains__(self, name: str) -> bool:
        return self.find_by_name(name) is not None


class Project:
    """A node in the project tree, backed by an invoke Collection."""

    def __init__(self, name: str, collection: Collection, parent: Optional['Project'] = None):
        self.name = name
        self.collection = collection
        self.parent = parent
        self.children: List['Project'] = []
        self.properties: Dict[str, Any] = {}
        self.extra_properties: Dict[str, Any] = {}
        self.extensions: Dict[str, Any] = {}
        self.tasks = TaskContainer(self)
        self.task_graph = parent.task_graph if parent is not None else TaskGraph()
        if parent is None:
            _root_projects[id(collection)] = self

    @classmethod
    def from_collection(cls, collection: Collection, name: str = None,
                        parent: Optional['Project'] = None) -> 'Project':
        """Build a project tree from an invoke collection and its nested collections."""
        project = cls(name or collection.name or 'root', collection, parent)
        for child_name, child in collection.collections.items():
            project.children.append(cls.from_collection(child, name=child_name, parent=project))
        return project

    @classmethod
    def for_collection(cls, collection: Collection) -> Optional['Project']:
        """The root project built from this collection, if there is one."""
        project = _root_projects.get(id(collection))
        if project is not None and project.collection is collection:
            return project
        return None

    # Tree

    @property
    def root_project(self) -> 'Project':
        project = self
        while project.parent is not None:
            project = project.parent
        return project

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def subprojects(self) -> List['Project']:
        """All descendants of this project, depth first."""
        result = []
        for child in self.children:
            result.append(child)
            result.extend(child.subprojects)
        return result

    @property
    def all_projects(self) -> List['Project']:
        return [self] + self.subprojects

    @property
    def path(self) -> str:
        if self.parent is None:
            return PATH_SEPARATOR
        if self.parent.parent is None:
            return f"{PATH_SEPARATOR}{self.name}"
        return f"{self.parent.path}{PATH_SEPARATOR}{self.name}"

    def _segments(self) -> List[str]:
        if self.parent is None:
            return []
        return self.parent._segments() + [self.name]

    def task_path(self, task_name: str) -> str:
        """The ':'-separated path of a task in this project, e.g. ':core:test'."""
        if self.parent is None:
            return f"{PATH_SEPARATOR}{task_name}"
        return f"{self.path}{PATH_SEPARATOR}{task_name}"

    def invoke_path(self, task_name: str) -> str:
        """The dotted name invoke uses for a task in this project, e.g. 'core.test'."""
        return '.'.join(self._segments() + [task_name])

    def find_project(self, path: str) -> 'Project':
        """
        Find a project by ':'-path (':core:api') or dotted path ('core.api').

        Raises:
            UnknownProjectException: If no such project exists
        """
        if path in ('', PATH_SEPARATOR):
            return self.root_project
        if path.startswith(PATH_SEPARATOR):
            project, segments = self.root_project, path.strip(PATH_SEPARATOR).split(PATH_SEPARATOR)
        else:
            project, segments = self, path.split('.')

        for segment in segments:
            match = next((child for child in project.children if child.name == segment), None)
            if match is None:
                raise UnknownProjectException(f"Project '{path}' not found", project_path=path)
            project = match
        return project

    def find_task_by_path(self, path: str) -> Optional[Call]:
        """Resolve an absolute task path like ':docs:check' to a call, or None."""
        project_path, _, task_name = path.rpartition(PATH_SEPARATOR)
        try:
            project = self.find_project(project_path or PATH_SEPARATOR)
        except UnknownProjectException:
            return None
        task = project.tasks.find_by_name(task_name)
        if task is None:
            return None
        return Call(task, called_as=project.invoke_path(task_name))

    def project_for_call(self, call: Call) -> 'Project':
        """The project owning a call, from its task or its dotted invoke name."""
        if isinstance(call.task, ProjectTask):
            return call.task.project
        if not call.called_as or '.' not in call.called_as:
            return self.root_project
        try:
            return self.root_project.find_project(call.called_as.rpartition('.')[0])
        except UnknownProjectException:
            return self.root_project

    # Dependencies

    def resolve_dependencies(self, dependencies: List[Any]) -> List[Call]:
        """
        Turn task dependencies into invoke pre-task calls.

        A dependency may be a task name, a ':'-path, a task, a task provider,
        a call, or a callable/list producing more of these.

        Raises:
            UnknownTaskException: If a name or path does not resolve
        """
        calls = []
        for dependency in dependencies:
            if isinstance(dependency, (list, tuple)):
                calls.extend(self.resolve_dependencies(list(dependency)))
            elif isinstance(dependency, str):
                calls.append(self._resolve_task_name(dependency))
            elif isinstance(dependency, TaskProvider):
                calls.append(self._call_for(dependency.task))
            elif isinstance(dependency, Call):
                calls.append(dependency)
            elif isinstance(dependency, Task):
                calls.append(self._call_for(dependency))
            elif callable(dependency):
                calls.extend(self.resolve_dependencies(list(dependency())))
            else:
                raise TypeError(f"Cannot use {dependency!r} as a task dependency")
        return calls

    def _resolve_task_name(self, name: str) -> Call:
        if name.startswith(PATH_SEPARATOR):
            call = self.find_task_by_path(name)
        else:
            task = self.tasks.find_by_name(name)
            call = Call(task, called_as=self.invoke_path(name)) if task is not None else None
        if call is None:
            raise UnknownTaskException(
                f"Task '{name}' not found in project '{self.path}'",
                task_path=name,
                project_path=self.path
            )
        return call

    def _call_for(self, task: Task) -> Call:
        if isinstance(task, ProjectTask):
            return Call(task, called_as=task.project.invoke_path(task.name))
        return Call(task)

    # Properties

    def has_property(self, name: str) -> bool:
        """True if this project or one of its ancestors has the property."""
        project = self
        while project is not None:
            if name in project.properties or name in project.extra_properties:
                return True
            project = project.parent
        return False

    def find_property(self, name: str, default: Any = None) -> Any:
        project = self
        while project is not None:
            if name in project.extra_properties:
                return project.extra_properties[name]
            if name in project.properties:
                return project.properties[name]
            project = project.parent
        return default

    def effective_properties(self) -> Dict[str, Any]:
        """All properties visible from this project; the nearest project wins."""
        chain = []
        project = self
        while project is not None:
            chain.insert(0, project)
            project = project.parent
        result = {}
        for project in chain:
            result.update(project.properties)
            result.update(project.extra_properties)
        return result

    def declare_property(self, name: str, value: Any) -> None:
        """Declare a project property, visible to task bodies as ctx.config[name].

        Under BuildTypeExecutor a subproject's own value takes precedence over
        an ancestor's; plain invoke lets the outer collection win.
        """
        self.properties[name] = value
        self.collection.configure({name: value})

    def set_or_create_property(self, name: str, value: Any) -> None:
        """Set an existing property, or create it as an extra property."""
        if name in self.extra_properties or not self.has_property(name):
            logger.debug(f"Creating property {name}={value!r} on {self.path}")
            self.extra_properties[name] = value
        else:
            logger.debug(f"Setting property {name}={value!r} on {self.path}")
            self.properties[name] = value
        self.collection.configure({name: value})

    def __repr__(self):
        return f"<Project {self.path!r}>"
