"""Shared task tree for build type tests.

    root
    ├── core      lint, test
    │   └── api   test
    └── docs      check
"""

import unittest

from invoke import Collection, Config, task

from buildtypes.build.graph import BuildTypeExecutor
from buildtypes.build.plugin import BuildTypesPlugin
from buildtypes.build.project import Project

# (task path, testSplit seen by the task body)
CALLS = []


@task(name='lint')
def core_lint(ctx):
    CALLS.append(('core.lint', ctx.config.get('testSplit')))


@task(name='test')
def core_test(ctx):
    CALLS.append(('core.test', ctx.config.get('testSplit')))


@task(name='test')
def api_test(ctx):
    CALLS.append(('core.api.test', ctx.config.get('testSplit')))


@task(name='check')
def docs_check(ctx):
    CALLS.append(('docs.check', ctx.config.get('testSplit')))


def make_namespace() -> Collection:
    core = Collection('core', core_lint, core_test)
    core.add_collection(Collection('api', api_test))
    docs = Collection('docs', docs_check)
    return Collection(core, docs)


class BaseBuildTypesTest(unittest.TestCase):
    """Fresh namespace, project tree and build types for every test."""

    def setUp(self):
        CALLS.clear()
        self.namespace = make_namespace()
        self.project = Project.from_collection(self.namespace)
        self.build_types = BuildTypesPlugin().apply(self.project)

    def tearDown(self):
        CALLS.clear()

    def execute(self, *task_names):
        executor = BuildTypeExecutor(self.namespace, config=Config())
        return executor.execute(*task_names)

    def executed(self):
        return [path for path, _ in CALLS]
