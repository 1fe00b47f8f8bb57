# FILE: matching_core/__init__.py
"""
matching_core package: Hungarian assignment driver, coverage cores, labeled graphs, IO, and validation.
"""
__all__ = [
    "assignment",
    "config",
    "constants",
    "cores",
    "errors",
    "hungarian",
    "io",
    "labels",
    "models",
    "validation",
]
