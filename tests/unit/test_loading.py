import os
import shutil
import tempfile
import unittest
from pathlib import Path

from invoke import Config

from buildtypes.build.config.exceptions import BuildTypesFileException, UnknownProjectException
from buildtypes.build.config.loading import (
    apply_build_types,
    find_build_types_file,
    load_build_types_config,
)
from buildtypes.build.graph import BuildTypeExecutor

from .base import CALLS, make_namespace

BUILD_TYPES_YAML = """
build_types:
  quickCheck:
    tasks: [lint, ":docs:check"]
  fullCheck:
    tasks:
      - test
    properties:
      testSplit: "2/2"
  empty:
projects:
  core.api:
    properties:
      flaky: true
"""


class TestBuildTypesFile(unittest.TestCase):
    """Reading build-types.yaml."""

    def setUp(self):
        self.tmp = Path(tempfile.mkdtemp(prefix='buildtypes-unit-testing-'))
        self.original_cwd = os.getcwd()
        CALLS.clear()

    def tearDown(self):
        os.chdir(self.original_cwd)
        shutil.rmtree(self.tmp, ignore_errors=True)
        CALLS.clear()

    def write(self, relative, content):
        path = self.tmp / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def test_load(self):
        path = self.write('build-types.yaml', BUILD_TYPES_YAML)

        config = load_build_types_config(path)

        self.assertEqual(list(config.build_types), ['quickCheck', 'fullCheck', 'empty'])
        self.assertEqual(config.build_types['quickCheck'].tasks, ['lint', ':docs:check'])
        self.assertEqual(config.build_types['fullCheck'].properties, {'testSplit': '2/2'})
        self.assertEqual(config.build_types['empty'].tasks, [])
        self.assertEqual(config.projects['core.api'].properties, {'flaky': True})
        self.assertEqual(config.source, str(path))

    def test_camel_case_key_is_accepted(self):
        path = self.write('build-types.yaml', "buildTypes:\n  quickCheck:\n    tasks: lint\n")
        config = load_build_types_config(path)
        self.assertEqual(config.build_types['quickCheck'].tasks, ['lint'])

    def test_find_in_config_directory(self):
        path = self.write('config/build-types.yaml', BUILD_TYPES_YAML)
        self.assertEqual(find_build_types_file(self.tmp), path)

    def test_working_directory_file_wins(self):
        path = self.write('build-types.yaml', BUILD_TYPES_YAML)
        self.write('config/build-types.yaml', BUILD_TYPES_YAML)
        self.assertEqual(find_build_types_file(self.tmp), path)

    def test_no_file_means_no_build_types(self):
        os.chdir(self.tmp)
        self.assertIsNone(find_build_types_file())
        self.assertEqual(load_build_types_config().build_types, {})

    def test_search_from_working_directory(self):
        self.write('build-types.yaml', BUILD_TYPES_YAML)
        os.chdir(self.tmp)
        self.assertIn('quickCheck', load_build_types_config().build_types)

    def test_missing_explicit_file(self):
        with self.assertRaises(BuildTypesFileException) as context:
            load_build_types_config(self.tmp / 'nope.yaml')
        self.assertIn('nope.yaml', context.exception.guidance)

    def test_invalid_yaml(self):
        path = self.write('build-types.yaml', "build_types: [unclosed\n")
        with self.assertRaises(BuildTypesFileException):
            load_build_types_config(path)

    def test_invalid_structure(self):
        for content in ("- just\n- a list\n", "build_types:\n  quickCheck:\n    tasks: {a: b}\n"):
            with self.subTest(content=content):
                path = self.write('build-types.yaml', content)
                with self.assertRaises(BuildTypesFileException):
                    load_build_types_config(path)

    def test_apply_build_types(self):
        path = self.write('build-types.yaml', BUILD_TYPES_YAML)
        namespace = make_namespace()

        build_types = apply_build_types(namespace, path)

        self.assertEqual(build_types.names, ['quickCheck', 'fullCheck', 'empty'])
        api = namespace.collections['core'].collections['api']
        self.assertTrue(api.configuration()['flaky'])
        self.assertIn('fullCheck', api.tasks)

        BuildTypeExecutor(namespace, config=Config()).execute('core.fullCheck')
        self.assertEqual(CALLS, [('core.test', '2/2')])
        self.assertTrue(build_types['fullCheck'].active)

    def test_apply_exposes_extension(self):
        namespace = make_namespace()
        os.chdir(self.tmp)
        build_types = apply_build_types(namespace)
        self.assertEqual(len(build_types), 0)
        build_types.create('quickCheck', tasks=['lint'])
        self.assertIn('quickCheck', namespace.collections['docs'].tasks)

    def test_unknown_project(self):
        path = self.write('build-types.yaml', "projects:\n  nowhere:\n    properties: {a: 1}\n")
        with self.assertRaises(UnknownProjectException):
            apply_build_types(make_namespace(), path)


if __name__ == '__main__':
    unittest.main()
