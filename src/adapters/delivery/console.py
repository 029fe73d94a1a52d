"""
Console code sender adapter - Implements CodeSender protocol.

This module provides a console-based implementation of the domain's
code delivery port, logging one-time codes for development use.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleCodeSender:
    """
    Implements CodeSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For development - logs one-time codes instead of sending an SMS.
    """

    def send_code(self, destination: str, code: str) -> bool:
        """
        Log one-time code to console (simulates SMS delivery).

        The code is logged at INFO level to be visible in container logs.

        Args:
            destination: Recipient phone number or email address
            code: 6-digit one-time code

        Returns:
            Always True
        """
        logger.info("[OTP] To: %s Code: %s", destination, code)
        return True
