"""Exception types shared by the core and the host modules."""

from __future__ import annotations


class RimtagError(Exception):
    """Base class for rimtag errors."""


class CatalogueError(RimtagError):
    """The catalogue file or a mod's About.xml could not be read or written."""


class InvariantError(RimtagError, RuntimeError):
    """Internal state that mode guarding should have made unreachable."""
