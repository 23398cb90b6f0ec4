"""MCP server entry point for MagicHome lighting controllers.

Exposes tools and resources via the Model Context Protocol using the
official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import load_settings
from .exceptions import ProtocolError, TransportError
from .protocol.commands import Color, Effect
from .session import DeviceSession

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "magichome",
    instructions="MCP server for MagicHome RGB lighting controllers",
)

# Global connection state
_session: DeviceSession | None = None
_address: tuple[str, int] | None = None


def _get_session() -> DeviceSession:
    """Get the active session, raising if not connected."""
    if _session is None or _session.closed:
        raise RuntimeError(
            "Not connected to a controller. Use the 'connect' tool first."
        )
    return _session


def _drop_session() -> None:
    """Close and forget the active session after a transport failure."""
    global _session, _address
    if _session is not None:
        _session.close()
    _session = None
    _address = None


def _send(action, *args):
    """Run one session call; a failed transport ends the session."""
    session = _get_session()
    try:
        return action(session, *args)
    except TransportError:
        logger.warning("Transport failed, dropping session to %s", _address)
        _drop_session()
        raise


# ─── PRESETS ─────────────────────────────────────────────────────────

COLOR_PRESETS: dict[str, Color] = {
    "red": Color(255, 0, 0),
    "green": Color(0, 255, 0),
    "blue": Color(0, 0, 255),
    "lime": Color(255, 255, 0),
    "yellow": Color(255, 110, 0),
    "pink": Color(255, 0, 170),
    "cyan": Color(0, 255, 255),
    "purple": Color(170, 0, 255),
    "orange": Color(255, 24, 0),
    "white": Color(255, 255, 255),
}

EFFECT_DESCRIPTIONS = {
    Effect.AMBIENT: "Slow cycle",
    Effect.RAINBOW: "Fast cycle",
    Effect.CHAOS: "Red strobe",
}


# ─── CONNECTION TOOLS ────────────────────────────────────────────────

@mcp.tool()
def connect(host: str | None = None, port: int | None = None) -> dict[str, Any]:
    """Open a TCP connection to a MagicHome controller.

    Args:
        host: Controller IP address (default: MAGICHOME_HOST).
        port: Controller port (default: MAGICHOME_PORT or 5577).
    """
    global _session, _address
    settings = load_settings()
    host = host or settings.host
    port = port if port is not None else settings.port
    if not host:
        return {"error": "No host given and MAGICHOME_HOST is not set"}
    if not 0 < port <= 65535:
        return {"error": f"Port must be 1-65535, got {port}"}

    if _session is not None and not _session.closed:
        if _address == (host, port):
            return {"connected": True, "message": "Already connected"}
        _drop_session()

    _session = DeviceSession.connect(host, port, timeout=settings.timeout)
    _address = (host, port)
    return {"connected": True, "host": host, "port": port}


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the connection to the controller."""
    _drop_session()
    return {"disconnected": True}


# ─── CONTROL TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def power_on() -> dict[str, Any]:
    """Turn the lights on."""
    _send(DeviceSession.power_on)
    return {"power": "on"}


@mcp.tool()
def power_off() -> dict[str, Any]:
    """Turn the lights off."""
    _send(DeviceSession.power_off)
    return {"power": "off"}


@mcp.tool()
def set_color(red: int, green: int, blue: int) -> dict[str, Any]:
    """Show a static RGB color.

    Args:
        red: Red channel 0-255.
        green: Green channel 0-255.
        blue: Blue channel 0-255.
    """
    try:
        color = Color(red, green, blue)
    except ValueError as e:
        return {"error": str(e)}

    _send(DeviceSession.set_color, color)
    return {"color": list(color.as_tuple())}


@mcp.tool()
def set_named_color(name: str) -> dict[str, Any]:
    """Show one of the preset static colors.

    Args:
        name: red, green, blue, yellow, orange, lime, purple, pink, cyan or white.
    """
    color = COLOR_PRESETS.get(name.strip().lower())
    if color is None:
        return {"error": f"Unknown color '{name}'. Valid: {list(COLOR_PRESETS)}"}

    _send(DeviceSession.set_color, color)
    return {"name": name.strip().lower(), "color": list(color.as_tuple())}


@mcp.tool()
def set_effect(effect: str, speed: int | None = None) -> dict[str, Any]:
    """Run a built-in effect.

    Args:
        effect: ambient (slow cycle), rainbow (fast cycle) or chaos (red strobe).
        speed: Optional speed 0-100, higher is faster.
    """
    try:
        chosen = Effect[effect.strip().upper()]
    except KeyError:
        valid = [e.name.lower() for e in Effect]
        return {"error": f"Unknown effect '{effect}'. Valid: {valid}"}

    if speed is None:
        speed = chosen.default_speed
    if not 0 <= speed <= 100:
        return {"error": f"Speed must be 0-100, got {speed}"}

    _send(DeviceSession.set_effect, chosen, speed)
    return {"effect": chosen.name.lower(), "speed": speed}


@mcp.tool()
def get_status() -> dict[str, Any]:
    """Read power state, mode, color and speed from the controller."""
    try:
        status = _send(DeviceSession.query_status)
    except ProtocolError as e:
        return {"error": f"Invalid status reply: {e}"}
    return status.to_dict()


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("magichome://presets/colors")
def resource_colors() -> str:
    """Preset static colors."""
    return json.dumps(
        {name: list(color.as_tuple()) for name, color in COLOR_PRESETS.items()}
    )


@mcp.resource("magichome://presets/effects")
def resource_effects() -> str:
    """Built-in effects with their default speeds."""
    return json.dumps({
        effect.name.lower(): {
            "description": description,
            "default_speed": effect.default_speed,
        }
        for effect, description in EFFECT_DESCRIPTIONS.items()
    })


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    settings = load_settings()
    logging.basicConfig(level=settings.log_level)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
