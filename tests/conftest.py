"""
Root pytest configuration for the build types test suite.
"""

from buildtypes.build.config.logging import bootstrap_logging

pytest_plugins = ["pytester"]

# Bootstrap logging for all tests
bootstrap_logging()
