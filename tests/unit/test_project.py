import unittest

from invoke import Call, Config

from buildtypes.build.config.exceptions import DuplicateTaskException, UnknownProjectException, UnknownTaskException
from buildtypes.build.graph import BuildTypeExecutor
from buildtypes.build.project import Project, ProjectTask

from .base import CALLS, api_test, core_lint, docs_check, make_namespace


class TestProjectTree(unittest.TestCase):
    """Projects mirror the nesting of invoke collections."""

    def setUp(self):
        self.project = Project.from_collection(make_namespace())

    def test_paths(self):
        core = self.project.find_project('core')
        api = core.find_project('api')
        self.assertEqual(self.project.path, ':')
        self.assertEqual(core.path, ':core')
        self.assertEqual(api.path, ':core:api')
        self.assertEqual(api.task_path('test'), ':core:api:test')
        self.assertEqual(api.invoke_path('test'), 'core.api.test')
        self.assertEqual(self.project.task_path('quickCheck'), ':quickCheck')

    def test_subprojects_are_all_descendants(self):
        self.assertEqual([p.path for p in self.project.subprojects], [':core', ':core:api', ':docs'])
        self.assertEqual([p.path for p in self.project.all_projects], [':', ':core', ':core:api', ':docs'])

    def test_root_project(self):
        api = self.project.find_project(':core:api')
        self.assertIs(api.root_project, self.project)
        self.assertTrue(self.project.is_root)
        self.assertFalse(api.is_root)
        self.assertIs(api.task_graph, self.project.task_graph)

    def test_find_project_by_dotted_or_absolute_path(self):
        self.assertIs(self.project.find_project('core.api'), self.project.find_project(':core:api'))
        self.assertIs(self.project.find_project(':'), self.project)

    def test_unknown_project(self):
        with self.assertRaises(UnknownProjectException):
            self.project.find_project(':core:missing')

    def test_find_task_by_path(self):
        call = self.project.find_task_by_path(':core:api:test')
        self.assertIs(call.task, api_test)
        self.assertEqual(call.called_as, 'core.api.test')
        self.assertIsNone(self.project.find_task_by_path(':core:missing'))
        self.assertIsNone(self.project.find_task_by_path(':nowhere:test'))


class TestTaskContainer(unittest.TestCase):
    """Lazy task registration."""

    def setUp(self):
        CALLS.clear()
        self.namespace = make_namespace()
        self.project = Project.from_collection(self.namespace)
        self.core = self.project.find_project('core')

    def test_existing_tasks(self):
        self.assertIs(self.core.tasks.find_by_name('lint'), core_lint)
        self.assertIn('test', self.core.tasks)
        self.assertNotIn('check', self.core.tasks)
        self.assertEqual(sorted(self.core.tasks.names), ['lint', 'test'])

    def test_register_adds_task_to_collection(self):
        provider = self.core.tasks.register('verify')
        self.assertIsInstance(provider.task, ProjectTask)
        self.assertIs(self.namespace.collections['core'].tasks['verify'], provider.task)
        self.assertEqual(provider.task.path, ':core:verify')

    def test_register_duplicate(self):
        with self.assertRaises(DuplicateTaskException):
            self.core.tasks.register('lint')
        with self.assertRaises(DuplicateTaskException):
            self.core.tasks.register('api')

    def test_configure_runs_on_realization_only(self):
        provider = self.core.tasks.register('verify')
        seen = []
        provider.configure(lambda task: seen.append(task.name))
        self.assertEqual(seen, [])

        provider.get()
        provider.get()
        self.assertEqual(seen, ['verify'])

        # Already realized: runs straight away
        provider.configure(lambda task: seen.append('late'))
        self.assertEqual(seen, ['verify', 'late'])

    def test_dependencies_resolve_to_pre_calls(self):
        provider = self.core.tasks.register('verify')
        provider.configure(lambda task: task.depends_on.extend(['lint', ':docs:check', lambda: ['test']]))

        task = provider.get()

        self.assertEqual([call.called_as for call in task.pre], ['core.lint', 'docs.check', 'core.test'])
        self.assertIs(task.pre[1].task, docs_check)

    def test_unknown_dependency(self):
        provider = self.core.tasks.register('verify')
        provider.configure(lambda task: task.depends_on.append('check'))
        with self.assertRaises(UnknownTaskException):
            provider.get()

    def test_project_tasks_with_same_name_are_distinct(self):
        core_verify = self.core.tasks.register('verify').task
        docs_verify = self.project.find_project('docs').tasks.register('verify').task
        self.assertNotEqual(core_verify, docs_verify)
        self.assertEqual(core_verify, core_verify)

    def test_executor_realizes_and_reports_graph(self):
        provider = self.core.tasks.register('verify')
        provider.configure(lambda task: task.depends_on.append('lint'))
        graphs = []
        self.project.task_graph.when_ready(lambda graph: graphs.append(graph.all_tasks))

        BuildTypeExecutor(self.namespace, config=Config()).execute('core.verify')

        self.assertTrue(provider.realized)
        self.assertEqual(graphs, [[provider.task]])
        self.assertEqual(CALLS, [('core.lint', None)])

    def test_call_dependency_is_kept(self):
        call = Call(docs_check, called_as='docs.check')
        provider = self.core.tasks.register('verify')
        provider.configure(lambda task: task.depends_on.append(call))
        self.assertIs(provider.get().pre[0], call)


class TestProjectProperties(unittest.TestCase):
    """Property lookup, declaration and set-or-create."""

    def setUp(self):
        self.namespace = make_namespace()
        self.project = Project.from_collection(self.namespace)
        self.core = self.project.find_project('core')
        self.api = self.project.find_project('core.api')

    def test_properties_are_inherited(self):
        self.core.declare_property('flaky', False)
        self.assertTrue(self.api.has_property('flaky'))
        self.assertFalse(self.api.find_property('flaky', True))
        self.assertFalse(self.project.has_property('flaky'))

    def test_create_property(self):
        self.api.set_or_create_property('testSplit', '1/2')
        self.assertEqual(self.api.extra_properties, {'testSplit': '1/2'})
        self.assertEqual(self.api.properties, {})
        self.assertEqual(self.namespace.collections['core'].collections['api'].configuration()['testSplit'], '1/2')

    def test_set_inherited_property(self):
        self.core.declare_property('testSplit', '1/1')
        self.api.set_or_create_property('testSplit', '2/2')
        self.assertEqual(self.api.properties, {'testSplit': '2/2'})
        self.assertEqual(self.core.properties, {'testSplit': '1/1'})

    def test_effective_properties_nearest_wins(self):
        self.project.declare_property('testSplit', '1/3')
        self.project.declare_property('flaky', False)
        self.core.declare_property('testSplit', '2/3')
        self.api.set_or_create_property('owner', 'api')

        self.assertEqual(self.api.effective_properties(), {'testSplit': '2/3', 'flaky': False, 'owner': 'api'})
        self.assertEqual(self.project.effective_properties(), {'testSplit': '1/3', 'flaky': False})

    def test_project_for_call(self):
        self.assertIs(self.project.project_for_call(Call(api_test, called_as='core.api.test')), self.api)
        self.assertIs(self.project.project_for_call(Call(core_lint)), self.project)
        self.assertIs(Project.for_collection(self.namespace), self.project)
        self.assertIsNone(Project.for_collection(make_namespace()))

    def test_set_extra_property_again(self):
        self.api.set_or_create_property('testSplit', '1/2')
        self.api.set_or_create_property('testSplit', '2/2')
        self.assertEqual(self.api.extra_properties, {'testSplit': '2/2'})
        self.assertEqual(self.api.find_property('testSplit'), '2/2')


if __name__ == '__main__':
    unittest.main()
