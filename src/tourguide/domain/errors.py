"""
Error types shared across layers.

Each error also subclasses the closest builtin so callers that only know the
standard hierarchy (`LookupError`, `RuntimeError`, `ValueError`) keep working.
"""

from __future__ import annotations


class TourGuideError(Exception):
    """Base class for application errors."""


class UserNotFound(TourGuideError, LookupError):
    def __init__(self, user_name: str):
        super().__init__(f"Unknown user '{user_name}'.")
        self.user_name = user_name


class ProviderUnavailable(TourGuideError, RuntimeError):
    """An external GPS, points or pricing call failed."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider} provider unavailable: {message}")
        self.provider = provider


class InvalidProximityConfig(TourGuideError, ValueError):
    pass
