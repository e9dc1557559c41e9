"""Task collection for build types.

Add it to your own namespace, or run the tasks directly:

    inv -c buildtypes.tasks build-types
"""

from invoke import Collection

from buildtypes.build.tasks import build_types, test

namespace = Collection()

for submodule in [build_types, test]:
    submodule_collection = Collection.from_module(submodule)
    for task_name, task in submodule_collection.tasks.items():
        namespace.add_task(task, name=task_name)
