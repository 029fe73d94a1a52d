"""
Unit tests for code delivery adapters.

Tests verify both senders implement CodeSender, log or post the code,
and report failures as False instead of raising.
"""

import json
import logging

import httpx
import pytest

from src.adapters.delivery.console import ConsoleCodeSender
from src.adapters.delivery.http import HttpCodeSender
from src.domain.ports import CodeSender


class TestConsoleCodeSender:
    def test_implements_code_sender_protocol(self) -> None:
        def accepts_code_sender(s: CodeSender) -> None:
            pass

        accepts_code_sender(ConsoleCodeSender())
        assert ConsoleCodeSender.__bases__ == (object,)

    def test_logs_code_at_info(self, caplog: pytest.LogCaptureFixture) -> None:
        sender = ConsoleCodeSender()

        with caplog.at_level(logging.INFO):
            result = sender.send_code("+919876543210", "042917")

        assert result is True
        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.INFO
        assert "[OTP]" in caplog.text
        assert "To: +919876543210" in caplog.text
        assert "Code: 042917" in caplog.text


class TestHttpCodeSender:
    def make_sender(self, handler) -> HttpCodeSender:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return HttpCodeSender("https://sms.example.test/send", client=client)

    def test_posts_destination_and_code(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(202)

        assert self.make_sender(handler).send_code("+919876543210", "123456") is True
        assert str(seen[0].url) == "https://sms.example.test/send"
        assert json.loads(seen[0].read()) == {"to": "+919876543210", "code": "123456"}

    def test_gateway_error_returns_false(self) -> None:
        sender = self.make_sender(lambda request: httpx.Response(503))

        assert sender.send_code("+919876543210", "123456") is False

    def test_timeout_returns_false(self, caplog: pytest.LogCaptureFixture) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("gateway too slow", request=request)

        assert self.make_sender(handler).send_code("+919876543210", "123456") is False
        assert "ReadTimeout" in caplog.text
        assert "123456" not in caplog.text

    def test_close_closes_client(self) -> None:
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        sender = HttpCodeSender("https://sms.example.test/send", client=client)

        sender.close()

        assert client.is_closed
