"""
bedrock task collection.

Task modules are collected into the program namespace by bedrock_pipeline.main.
"""

from invoke import Collection

from . import pipeline


def build_namespace() -> Collection:
    """Collect every task module into a flat namespace."""
    namespace = Collection()
    for submodule in [pipeline]:
        submodule_collection = Collection.from_module(submodule)
        for task_name, task in submodule_collection.tasks.items():
            namespace.add_task(task)
    return namespace
