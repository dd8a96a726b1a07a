"""Failure conditions raised by places providers and the aggregator."""

from __future__ import annotations


class ProviderUnavailable(Exception):
    """The places provider is unreachable or not configured.

    Callers should offer the user a retry; the aggregator never retries
    on its own.
    """


class PlaceQueryError(Exception):
    """A single keyword query failed.

    Raised by providers and absorbed by the aggregator unless every
    query of a radius attempt fails.
    """
