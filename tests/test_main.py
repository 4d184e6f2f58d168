"""Tests for main entry point."""

from unittest.mock import MagicMock, patch

import pytest

from switch_mcp.__main__ import run_server


class TestMain:
    """Tests for __main__ module."""

    def test_runs_with_http_transport_by_default(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Server runs with HTTP transport by default."""
        monkeypatch.delenv("SWITCH_TRANSPORT", raising=False)
        monkeypatch.setenv("SWITCH_HTTP_HOST", "127.0.0.1")
        monkeypatch.setenv("SWITCH_HTTP_PORT", "9000")
        mock_mcp = MagicMock()

        with patch("switch_mcp.__main__.mcp", mock_mcp):
            run_server()

        mock_mcp.run.assert_called_once_with(
            transport="http",
            host="127.0.0.1",
            port=9000,
        )

    def test_runs_with_stdio_when_configured(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Server runs with STDIO transport when configured."""
        monkeypatch.setenv("SWITCH_TRANSPORT", "stdio")
        mock_mcp = MagicMock()

        with patch("switch_mcp.__main__.mcp", mock_mcp):
            run_server()

        mock_mcp.run.assert_called_once_with(transport="stdio")
