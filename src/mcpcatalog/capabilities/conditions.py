"""Class-level conditional availability."""

from __future__ import annotations

from abc import ABC, abstractmethod

from mcpcatalog.core.console import get_logger

logger = get_logger(__name__)


class ConditionalProvider(ABC):
    """Base for contributor classes that are only sometimes available.

    is_available() is called once when the class is registered. Returning
    False skips every capability the class declares; no error is recorded.
    Typical checks: an optional package is installed, a service is
    configured, the environment allows it.
    """

    @classmethod
    @abstractmethod
    def is_available(cls) -> bool:
        """Return False to skip registration of this class."""


def is_class_available(cls: type) -> bool:
    """Run the class-level availability check, treating failures as unavailable."""
    if not issubclass(cls, ConditionalProvider):
        return True
    try:
        return bool(cls.is_available())
    except Exception as exc:
        logger.warning("Availability check for %s failed: %s", cls.__qualname__, exc)
        return False


__all__ = ["ConditionalProvider", "is_class_available"]
