"""Exceptions raised by cleanup operations."""

from __future__ import annotations


class CleanupError(Exception):
    """Base class for errors that fail a single cleanup operation."""


class UnsupportedPlatformError(CleanupError):
    """Raised when a cleanup target has no known location on this platform."""


class MissingEnvironmentError(CleanupError):
    """Raised when an environment value needed to locate a target is unset."""
