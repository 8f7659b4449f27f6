"""
Exceptions raised by the planner.
"""
from __future__ import annotations


class PlannerError(Exception):
    """Base class for planner errors."""


class FetchError(PlannerError):
    """The course provider could not be reached or answered with an error status."""


class ProviderError(PlannerError):
    """The provider answered, but the body could not be decoded."""
