"""
Tests for the sanmar-api command line.
"""

import json
from unittest.mock import AsyncMock, patch

import pytest

from sanmar_mcp import cli
from sanmar_mcp.tools.outcomes import DomainError, Success


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch.object(cli, "configure_logging"):
        yield


@pytest.fixture
def sanmar_env(monkeypatch):
    monkeypatch.setenv("SANMAR_CUSTOMER_NUMBER", "123456")
    monkeypatch.setenv("SANMAR_USERNAME", "apiuser")
    monkeypatch.setenv("SANMAR_PASSWORD", "s3cret")


class TestCli:
    """Tests for cli.main()"""

    def test_product_command(self, sanmar_env, capsys):
        with patch.object(cli, "call_tool", new_callable=AsyncMock) as mock_call:
            mock_call.return_value = Success([{"style": "PC61"}])
            cli.main(["product", "PC61", "White"])

        tool_name, arguments = mock_call.call_args[0]
        assert tool_name == "get_sanmar_product_info"
        assert arguments == {"style": "PC61", "color": "White"}
        assert json.loads(capsys.readouterr().out) == [{"style": "PC61"}]

    @pytest.mark.parametrize("command,tool_name", [
        ("inventory", "get_sanmar_inventory"),
        ("pricing", "get_sanmar_pricing"),
    ])
    def test_style_commands(self, sanmar_env, command, tool_name):
        with patch.object(cli, "call_tool", new_callable=AsyncMock) as mock_call:
            mock_call.return_value = Success({})
            cli.main([command, "PC61", "White", "XL"])

        assert mock_call.call_args[0] == (tool_name, {"style": "PC61", "color": "White", "size": "XL"})

    def test_call_command(self, sanmar_env):
        with patch.object(cli, "call_tool", new_callable=AsyncMock) as mock_call:
            mock_call.return_value = Success({})
            cli.main(["call", "get_ps_order_status", '{"queryType": "allOpen"}'])

        assert mock_call.call_args[0] == ("get_ps_order_status", {"queryType": "allOpen"})

    def test_error_outcome_exits_non_zero(self, sanmar_env, capsys):
        with patch.object(cli, "call_tool", new_callable=AsyncMock) as mock_call:
            mock_call.return_value = DomainError("Invalid style")
            with pytest.raises(SystemExit) as exc:
                cli.main(["pricing", "XX"])

        assert exc.value.code == 1
        captured = capsys.readouterr()
        assert "SanMar API Error: Invalid style" in captured.err
        assert "(error code -32603)" in captured.err
        assert captured.out == ""

    def test_missing_credentials(self, monkeypatch, capsys):
        monkeypatch.delenv("SANMAR_PASSWORD", raising=False)
        with pytest.raises(SystemExit) as exc:
            cli.main(["product", "PC61"])

        assert exc.value.code == 1
        assert "SANMAR_PASSWORD" in capsys.readouterr().err

    def test_bad_json_arguments(self, sanmar_env, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main(["call", "get_ps_order_status", "{not json"])

        assert exc.value.code == 1
        assert "not valid JSON" in capsys.readouterr().err

    def test_tools_command(self, capsys):
        cli.main(["tools"])

        tools = json.loads(capsys.readouterr().out)
        assert len(tools) == 32
        assert tools[0]["name"] == "get_sanmar_product_info"
