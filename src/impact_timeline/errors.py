"""Exceptions raised by the impact engine."""

from __future__ import annotations


class ImpactError(Exception):
    """Base class for impact engine errors."""


class ValidationError(ImpactError, ValueError):
    """Impact parameters violate a domain constraint.

    Raised before any computation happens.
    """


class DataUnavailableError(ImpactError):
    """A geo record lacks the data needed to place it.

    Soft error: the aggregator and loaders skip the record and carry on.
    """
