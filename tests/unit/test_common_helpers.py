"""Tests for shared command helpers."""

from __future__ import annotations

import asyncio
import signal
from unittest.mock import MagicMock

import pytest
import typer

from iwait.commands._common import (
    descriptor_details,
    install_signal_handlers,
    parse_basic_auth,
    parse_headers,
)
from iwait.parser import parse_resource


class TestParseHeaders:
    def test_none_returns_none(self):
        assert parse_headers(None) is None
        assert parse_headers([]) is None

    def test_name_value(self):
        assert parse_headers(["Accept: text/plain", "X-Id:42"]) == {
            "Accept": "text/plain",
            "X-Id": "42",
        }

    def test_value_may_contain_colon(self):
        assert parse_headers(["Referer: http://a/b"]) == {"Referer": "http://a/b"}

    @pytest.mark.parametrize("raw", ["novalue", ": empty-name"])
    def test_malformed(self, raw):
        with pytest.raises(typer.BadParameter):
            parse_headers([raw])


class TestParseBasicAuth:
    def test_none(self):
        assert parse_basic_auth(None) is None

    def test_user_and_password(self):
        creds = parse_basic_auth("admin:s3:cret")
        assert creds.username == "admin"
        assert creds.password == "s3:cret"

    def test_user_only(self):
        assert parse_basic_auth("admin").password == ""

    def test_missing_user(self):
        with pytest.raises(typer.BadParameter):
            parse_basic_auth(":secret")


class TestDescriptorDetails:
    def test_tcp(self):
        assert descriptor_details(parse_resource("tcp:db:5432")) == "host=db port=5432"

    def test_http_over_socket(self):
        details = descriptor_details(parse_resource("http://unix:/run/a.sock:/x"))
        assert details == "method=HEAD socket=/run/a.sock"

    def test_file(self):
        assert descriptor_details(parse_resource("/tmp/x")) == ""


class TestInstallSignalHandlers:
    def test_hooks_both_signals(self):
        loop = MagicMock()
        event = asyncio.Event()
        assert install_signal_handlers(loop, event) == [signal.SIGINT, signal.SIGTERM]
        loop.add_signal_handler.assert_any_call(signal.SIGINT, event.set)

    def test_unsupported_platform(self):
        loop = MagicMock()
        loop.add_signal_handler.side_effect = NotImplementedError
        assert install_signal_handlers(loop, asyncio.Event()) == []
