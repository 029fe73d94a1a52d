"""Rate guard adapters."""

from .memory import InMemoryRateGuard

__all__ = ["InMemoryRateGuard"]
