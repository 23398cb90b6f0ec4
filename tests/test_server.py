"""Tests for the MCP server tools."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, call, patch

import pytest

from magichome_mcp.exceptions import ChecksumMismatchError, TransportError
from magichome_mcp.protocol.commands import (
    Color,
    Effect,
    Mode,
    PowerOff,
    PowerOn,
    QueryStatus,
    SetColor,
    SetEffect,
)
from magichome_mcp.protocol.parser import StatusResponse


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch.dict(sys.modules, {}):
        with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
            # Remove cached server module so it re-imports with our mock
            sys.modules.pop("magichome_mcp.server", None)
            import magichome_mcp.server as server_mod

    return server_mod


@pytest.fixture
def server():
    return _get_server_module()


@pytest.fixture
def session(server):
    """Install a mock session as the active connection."""
    mock_session = MagicMock()
    mock_session.closed = False
    server._session = mock_session
    server._address = ("10.0.0.5", 5577)
    return mock_session


def test_tools_require_connection(server):
    with pytest.raises(RuntimeError, match="connect"):
        server.power_on()


def test_connect_without_host(server, monkeypatch):
    monkeypatch.delenv("MAGICHOME_HOST", raising=False)
    result = server.connect()
    assert "error" in result


def test_connect_uses_env_defaults(server, monkeypatch):
    monkeypatch.setenv("MAGICHOME_HOST", "10.0.0.9")
    monkeypatch.delenv("MAGICHOME_PORT", raising=False)
    monkeypatch.delenv("MAGICHOME_TIMEOUT", raising=False)
    fake = MagicMock(closed=False)

    with patch.object(server.DeviceSession, "connect", return_value=fake) as conn:
        result = server.connect()

    conn.assert_called_once_with("10.0.0.9", 5577, timeout=None)
    assert result == {"connected": True, "host": "10.0.0.9", "port": 5577}
    assert server._session is fake


def test_connect_twice_reuses_session(server, session):
    with patch.object(server.DeviceSession, "connect") as conn:
        result = server.connect("10.0.0.5", 5577)
    conn.assert_not_called()
    assert result["message"] == "Already connected"


def test_connect_elsewhere_replaces_session(server, session):
    fake = MagicMock(closed=False)
    with patch.object(server.DeviceSession, "connect", return_value=fake):
        server.connect("10.0.0.6", 5577)
    session.close.assert_called_once()
    assert server._session is fake


def test_disconnect(server, session):
    assert server.disconnect() == {"disconnected": True}
    session.close.assert_called_once()
    assert server._session is None


def test_power_tools(server, session):
    assert server.power_on() == {"power": "on"}
    assert server.power_off() == {"power": "off"}
    assert session.send.call_args_list == [call(PowerOn()), call(PowerOff())]


def test_set_color(server, session):
    assert server.set_color(255, 0, 128) == {"color": [255, 0, 128]}
    session.send.assert_called_once_with(SetColor(Color(255, 0, 128)))


def test_set_color_out_of_range(server, session):
    result = server.set_color(255, 0, 300)
    assert "error" in result
    session.send.assert_not_called()


def test_set_named_color(server, session):
    result = server.set_named_color(" Purple ")
    assert result == {"name": "purple", "color": [170, 0, 255]}
    session.send.assert_called_once_with(SetColor(Color(170, 0, 255)))


def test_set_named_color_unknown(server, session):
    assert "error" in server.set_named_color("mauve")
    session.send.assert_not_called()


def test_set_effect(server, session):
    result = server.set_effect("rainbow")
    assert result == {"effect": "rainbow", "speed": 99}
    assert session.send.call_args_list == [
        call(PowerOn()),
        call(SetEffect(Effect.RAINBOW, 99)),
    ]


def test_set_effect_bad_arguments(server, session):
    assert "error" in server.set_effect("disco")
    assert "error" in server.set_effect("chaos", speed=150)
    session.send.assert_not_called()


def test_get_status(server, session):
    session.send.return_value = StatusResponse(
        power=True, mode=Mode.STATIC, color=Color(255, 0, 128)
    )
    result = server.get_status()
    session.send.assert_called_once_with(QueryStatus())
    assert result == {"power": "on", "mode": "static", "color": [255, 0, 128]}


def test_get_status_protocol_error(server, session):
    session.send.side_effect = ChecksumMismatchError(expected=1, actual=2)
    result = server.get_status()
    assert "error" in result
    assert server._session is session


def test_transport_error_drops_session(server, session):
    session.send.side_effect = TransportError("reset")
    with pytest.raises(TransportError):
        server.power_on()
    session.close.assert_called_once()
    assert server._session is None


def test_color_presets_resource(server):
    colors = json.loads(server.resource_colors())
    assert colors["orange"] == [255, 24, 0]
    assert len(colors) == 10


def test_effects_resource(server):
    effects = json.loads(server.resource_effects())
    assert effects["chaos"] == {"description": "Red strobe", "default_speed": 95}
    assert set(effects) == {"ambient", "rainbow", "chaos"}


def test_connect_explicit_port_zero_is_rejected(server, monkeypatch):
    """An explicit port is never swapped for the default."""
    monkeypatch.setenv("MAGICHOME_HOST", "10.0.0.9")
    monkeypatch.delenv("MAGICHOME_PORT", raising=False)

    with patch.object(server.DeviceSession, "connect") as conn:
        result = server.connect(port=0)

    assert "error" in result
    assert "0" in result["error"]
    conn.assert_not_called()


def test_connect_explicit_port(server, monkeypatch):
    monkeypatch.delenv("MAGICHOME_TIMEOUT", raising=False)
    fake = MagicMock(closed=False)
    with patch.object(server.DeviceSession, "connect", return_value=fake) as conn:
        result = server.connect("10.0.0.9", 6000)
    conn.assert_called_once_with("10.0.0.9", 6000, timeout=None)
    assert result["port"] == 6000
