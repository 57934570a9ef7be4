"""Exception types raised by graph bookkeeping and layout stepping."""

from __future__ import annotations


class GraphWebError(Exception):
    """Base class for all package errors."""


class StructuralError(GraphWebError, UserWarning):
    """Inconsistent graph structure such as a duplicate id or dangling edge.

    Duplicate ids are reported as a warning and ignored unless
    ``Config.strict_ids`` is set. An edge whose endpoints are missing always
    raises.
    """


class SeedNotFoundError(GraphWebError, LookupError):
    """No node qualifies as a breadth-first search seed."""


class NumericInstabilityError(GraphWebError, ArithmeticError):
    """A layout step produced a non-finite position."""


class ConfigurationMismatchError(GraphWebError, ValueError):
    """Layout buffers do not match the attached graph's node or edge count."""


__all__ = [
    "GraphWebError",
    "StructuralError",
    "SeedNotFoundError",
    "NumericInstabilityError",
    "ConfigurationMismatchError",
]
