"""Code delivery adapters - console and HTTP gateway implementations."""

from .console import ConsoleCodeSender
from .http import HttpCodeSender

__all__ = ["ConsoleCodeSender", "HttpCodeSender"]
