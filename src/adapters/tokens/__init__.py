"""Session token adapters."""

from .jwt import JwtTokenIssuer

__all__ = ["JwtTokenIssuer"]
