"""
Task modules bundled with build types.

Modules are collected into the namespace in buildtypes.tasks using
Collection.from_module().
"""
