# matching_core/cores/__init__.py
"""
Cores Package - Coverage strategies for the Hungarian driver.

Importing this package registers the built-in cores:
    - dense: bit-vector bookkeeping, numpy scans (default)
    - basic: plain lists and loops
    - diagonal: square banded matrices (main diagonal +/- 1)
"""
from .base import CoverageCore, LazyValue
from .factory import (
    create_core,
    get_core_info,
    get_core_names,
    register_core,
    resolve_core_name,
)
from .dense import DenseCore
from .basic import BasicCore
from .diagonal import DiagonalCore

__all__ = [
    "CoverageCore",
    "LazyValue",
    "DenseCore",
    "BasicCore",
    "DiagonalCore",
    "create_core",
    "get_core_info",
    "get_core_names",
    "register_core",
    "resolve_core_name",
]
