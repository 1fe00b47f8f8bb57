# matching_core/cores/factory.py
"""
Core Factory Module - Registry and factory for coverage core instantiation.
"""
from __future__ import annotations
from typing import Any, Dict, List, Type

from ..constants import AUTO_CORE, DEFAULT_CORE
from .base import CoverageCore


# Global registry of cores
_CORES: Dict[str, Type[CoverageCore]] = {}


def register_core(cls: Type[CoverageCore]) -> Type[CoverageCore]:
    """
    Decorator to register a core class.

    Usage:
        @register_core
        class MyCore(CoverageCore):
            name = "my_core"
            ...

    Args:
        cls: Core class to register

    Returns:
        The same class (for decorator chaining)
    """
    _CORES[cls.name] = cls
    return cls


def resolve_core_name(name: str | None) -> str:
    """Map None / "auto" to the default core name."""
    if name is None or name == AUTO_CORE:
        return DEFAULT_CORE
    return name


def create_core(name: str | None = None, **kwargs: Any) -> CoverageCore:
    """
    Create a core instance by name.

    Args:
        name: Core name ("dense", "basic", "diagonal"); None or "auto"
            selects the default
        **kwargs: Additional arguments passed to the core constructor

    Returns:
        Core instance

    Raises:
        ValueError: If core name not found
    """
    key = resolve_core_name(name)
    if key not in _CORES:
        available = ", ".join(_CORES.keys())
        raise ValueError(f"Unknown core: {name}. Available: {available}")
    return _CORES[key](**kwargs)


def get_core_names() -> List[str]:
    return list(_CORES.keys())


def get_core_info() -> List[Dict[str, str]]:
    """
    Get name and description for all registered cores.

    Returns:
        List of dicts with 'name' and 'description' keys
    """
    return [
        {"name": cls.name, "description": cls.description}
        for cls in _CORES.values()
    ]
