# matching_core/errors.py
from __future__ import annotations


class AssignmentError(ValueError):
    """Base class for assignment solver failures."""


class MalformedCostsError(AssignmentError):
    """Cost input has the wrong shape or holds values the solver can't use."""


class MissingEndpointsError(AssignmentError):
    """A labeled candidate graph has nothing that can be assigned."""
