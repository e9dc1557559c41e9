"""
Task graph and the invoke executor that builds it.

invoke expands pre/post tasks into a flat list of calls before running
anything. BuildTypeExecutor hooks that expansion: every lazily registered
project task met along the way is realized and added to its project's task
graph, and once the whole invocation is expanded the graph's ready listeners
run. A listener that raises stops the build before any task body runs.

Each expanded call is then bound to the project that owns it, so its task
body sees that project's properties with the nearest project winning.
"""

import logging
from typing import Callable, List

from invoke import Call, Executor

logger = logging.getLogger(__name__)


class TaskGraph:
    """The tasks selected for execution in one invocation."""

    def __init__(self):
        self._tasks = []
        self._listeners: List[Callable[['TaskGraph'], None]] = []

    def when_ready(self, listener: Callable[['TaskGraph'], None]) -> None:
        self._listeners.append(listener)

    def add(self, task) -> None:
        if not self.has_task(task):
            self._tasks.append(task)

    def has_task(self, task) -> bool:
        return any(existing is task for existing in self._tasks)

    @property
    def all_tasks(self) -> list:
        return list(self._tasks)

    def fire_ready(self) -> None:
        logger.debug(f"Task graph ready with {len(self._tasks)} project tasks")
        for listener in list(self._listeners):
            listener(self)


class ProjectCall(Call):
    """A call whose context carries the properties of the project owning the task.

    invoke merges collection configuration with outer collections winning;
    the owning project's effective properties are laid over that merge.
    """

    def __init__(self, task, called_as=None, args=None, kwargs=None, project=None, collection=None):
        self.project = project
        self.collection = collection
        super().__init__(task, called_as=called_as, args=args, kwargs=kwargs)

    @classmethod
    def bind(cls, call: Call, project, collection) -> 'ProjectCall':
        return cls(call.task, called_as=call.called_as, args=call.args, kwargs=call.kwargs,
                   project=project, collection=collection)

    def make_context(self, config, *args, **kwargs):
        properties = self.project.effective_properties() if self.project is not None else {}
        if properties:
            collection_config = self.collection.configuration(self.called_as)
            config.load_collection({**collection_config, **properties})
        return super().make_context(config, *args, **kwargs)


class BuildTypeExecutor(Executor):
    """Executor that realizes project tasks and notifies task graph listeners."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._graphs = None

    def expand_calls(self, calls, *args, **kwargs):
        top_level = self._graphs is None
        if top_level:
            self._graphs = []
        try:
            for call in calls:
                self._realize(call.task if isinstance(call, Call) else call)
            expanded = super().expand_calls(calls, *args, **kwargs)
            if top_level:
                for graph in self._graphs:
                    graph.fire_ready()
                expanded = self._bind_projects(expanded)
        finally:
            if top_level:
                self._graphs = None
        return expanded

    def _realize(self, task) -> None:
        provider = getattr(task, 'provider', None)
        if provider is None:
            return
        provider.get()
        graph = task.project.task_graph
        graph.add(task)
        if not any(existing is graph for existing in self._graphs):
            self._graphs.append(graph)

    def _bind_projects(self, calls: list) -> list:
        from buildtypes.build.project import Project

        root = Project.for_collection(self.collection)
        if root is None:
            return calls
        return [ProjectCall.bind(call, root.project_for_call(call), self.collection) for call in calls]
