from __future__ import annotations


class DepgraphError(Exception):
    """Base class for errors raised by depgraph."""


class InvalidRepositoryError(DepgraphError, ValueError):
    """A repository URL is malformed or uses a scheme that is not allowed."""
