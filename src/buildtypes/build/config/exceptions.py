"""
Exception classes with built-in guidance for build type configuration.
"""
import sys


class ConfigException(Exception):
    """Base exception for all build type configuration errors."""
    def __init__(self, message: str, error_type: str = None, build_type: str = None,
                 task_path: str = None, project_path: str = None, config_file: str = None):
        super().__init__(message)
        self.error_type = error_type
        self.build_type = build_type
        self.task_path = task_path
        self.project_path = project_path
        self.config_file = config_file
        self.guidance = self._generate_guidance()

    def _get_current_command(self):
        """Get the current command being executed."""
        if len(sys.argv) > 0:
            # Just the filename for the executable, all of the arguments
            executable = sys.argv[0].split('/')[-1]
            args = sys.argv[1:]
            if args:
                return f"{executable} {' '.join(args)}"
            else:
                return executable
        return "unknown command"

    def _generate_guidance(self):
        """Override in subclasses to provide specific guidance."""
        return f"""
❌ Configuration error: {self}
💡 Check your build type configuration and try again
"""


class NotRootProjectException(ConfigException):
    """Raised when the build types plugin is applied to a subproject."""
    def __init__(self, message: str, project_path: str, **kwargs):
        super().__init__(message, error_type="not_root_project", project_path=project_path, **kwargs)

    def _generate_guidance(self):
        return f"""
❌ Build types can only be applied to the root project, not '{self.project_path}'
💡 Apply the plugin to the top-level collection of your tasks.py:
   apply_build_types(ns)
"""


class InvalidBuildTypeNameException(ConfigException):
    """Raised when a build type name cannot be used as a task name."""
    def __init__(self, message: str, build_type: str, **kwargs):
        super().__init__(message, error_type="invalid_name", build_type=build_type, **kwargs)

    def _generate_guidance(self):
        return f"""
❌ '{self.build_type}' is not a valid build type name
💡 Build type names must be non-empty and must not contain '.' or ':'
   (they become task names in every subproject)
"""


class DuplicateBuildTypeException(ConfigException):
    """Raised when two build types share a name."""
    def __init__(self, message: str, build_type: str, **kwargs):
        super().__init__(message, error_type="duplicate_build_type", build_type=build_type, **kwargs)

    def _generate_guidance(self):
        return f"""
❌ Build type '{self.build_type}' is declared more than once
💡 Remove the duplicate from build-types.yaml or from your tasks.py
"""


class UnknownBuildTypeException(ConfigException):
    """Raised when a build type is looked up by a name that was never declared."""
    def __init__(self, message: str, build_type: str, known: list = None, **kwargs):
        self.known = known or []
        super().__init__(message, error_type="unknown_build_type", build_type=build_type, **kwargs)

    def _generate_guidance(self):
        known = ', '.join(self.known) if self.known else 'none declared'
        return f"""
❌ Build type '{self.build_type}' does not exist
💡 Known build types: {known}
"""


class MultipleActiveBuildTypesException(ConfigException):
    """Raised when more than one build type is selected for a single invocation."""
    def __init__(self, message: str, active: list = None, **kwargs):
        self.active = active or []
        super().__init__(message, error_type="multiple_active_build_types", **kwargs)

    def _generate_guidance(self):
        command = self._get_current_command()
        return f"""
❌ {self}
💡 Build types are mutually exclusive. Run them one at a time, for example:
   {command.split(' ')[0]} {self.active[0] if self.active else '<build-type>'}
"""


class FinalizedValueException(ConfigException):
    """Raised when a build type value is changed after it has been finalized."""
    def __init__(self, message: str, build_type: str, **kwargs):
        super().__init__(message, error_type="finalized_value", build_type=build_type, **kwargs)

    def _generate_guidance(self):
        return f"""
❌ The project properties of build type '{self.build_type}' are final
💡 Properties are frozen once the build type task is realized.
   Declare them before running any task.
"""


class UnknownTaskException(ConfigException):
    """Raised when a task dependency or task path cannot be resolved."""
    def __init__(self, message: str, task_path: str, project_path: str = None, **kwargs):
        super().__init__(message, error_type="unknown_task", task_path=task_path,
                         project_path=project_path, **kwargs)

    def _generate_guidance(self):
        return f"""
❌ Task '{self.task_path}' not found (requested from project '{self.project_path or ':'}')
💡 Paths starting with ':' are resolved from the root project, e.g. ':docs:check'.
   List available tasks with: bt --list
"""


class DuplicateTaskException(ConfigException):
    """Raised when a task is registered twice in the same project."""
    def __init__(self, message: str, task_path: str, project_path: str = None, **kwargs):
        super().__init__(message, error_type="duplicate_task", task_path=task_path,
                         project_path=project_path, **kwargs)

    def _generate_guidance(self):
        return f"""
❌ Cannot add task '{self.task_path}' as a task with that name already exists
💡 Rename the task in your tasks.py or choose another build type name
"""


class UnknownProjectException(ConfigException):
    """Raised when a configured project path does not match any collection."""
    def __init__(self, message: str, project_path: str, **kwargs):
        super().__init__(message, error_type="unknown_project", project_path=project_path, **kwargs)

    def _generate_guidance(self):
        return f"""
❌ Project '{self.project_path}' not found
💡 Project keys in build-types.yaml are collection paths, e.g. 'core' or 'core.api'
"""


class BuildTypesFileException(ConfigException):
    """Raised when build-types.yaml cannot be read or does not validate."""
    def __init__(self, message: str, config_file: str = None, **kwargs):
        super().__init__(message, error_type="build_types_file", config_file=config_file, **kwargs)

    def _generate_guidance(self):
        return f"""
❌ Could not load build types from {self.config_file or 'build-types.yaml'}: {self}
💡 Expected layout:
   build_types:
     quickCheck:
       tasks: [lint, test]
       properties: {{testSplit: "1/2"}}
"""


class InvalidBucketCountException(ConfigException, ValueError):
    """Raised when work is split into a non-positive number of buckets."""
    def __init__(self, message: str, count=None, **kwargs):
        self.count = count
        super().__init__(message, error_type="invalid_bucket_count", **kwargs)

    def _generate_guidance(self):
        return f"""
❌ Cannot split into {self.count} buckets
💡 The number of buckets must be a positive integer
"""


class InvalidTestSplitException(ConfigException, ValueError):
    """Raised when a test split is not of the form <index>/<count>."""
    def __init__(self, message: str, value=None, **kwargs):
        self.value = value
        super().__init__(message, error_type="invalid_test_split", **kwargs)

    def _generate_guidance(self):
        return f"""
❌ Invalid test split '{self.value}'
💡 Use <index>/<count> with 1 <= index <= count, e.g. --test-split=2/4
"""
