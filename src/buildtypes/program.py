"""
The bt command: invoke with build type aware execution.

bt loads tasks.py from the working directory the same way invoke does, but
runs it with BuildTypeExecutor so lazily registered build type tasks are
realized and only one build type can run at a time.
"""

from invoke import Exit, Program

from buildtypes import __version__
from buildtypes.build.config.exceptions import ConfigException
from buildtypes.build.config.logging import bootstrap_logging
from buildtypes.build.graph import BuildTypeExecutor


class BuildTypesProgram(Program):
    """invoke Program that reports configuration errors with their guidance."""

    def execute(self):
        try:
            super().execute()
        except ConfigException as e:
            raise Exit(message=e.guidance, code=1)


program = BuildTypesProgram(
    name='build-types',
    binary='bt',
    version=__version__,
    executor_class=BuildTypeExecutor,
)


def main():
    bootstrap_logging()
    program.run()
