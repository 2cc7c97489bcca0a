"""A small HTTP/WebSocket server exposing the remote control of one TV session."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Dict, Optional

from aiohttp import WSMsgType, web

from .commands import Command, describe, parse_sequence
from .constants import NAVIGATION_LIMITS
from .focus import FocusAccessor, NavigationError, testid_focus_getter
from .input_driver import RemoteControl
from .menu import resolve_menu
from .pages.navigation_bar import HOME_ITEM, MENU_ITEMS, NavigationBar
from .search import search_for

logger = logging.getLogger(__name__)

RailAccessorFactory = Callable[[str], FocusAccessor]


def _step_budget(payload: Dict[str, Any], default: int) -> int:
    value = payload.get("maxSteps", default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'maxSteps' must be an integer, got {value!r}")
    return value


class BridgeServer:
    """Serve remote-control commands for a single UI session.

    Commands are executed one at a time; a second request waits until the
    running one (including every settling delay) has finished.
    """

    def __init__(
        self,
        remote: RemoteControl,
        *,
        menu_accessor: Optional[FocusAccessor] = None,
        rail_accessor: Optional[RailAccessorFactory] = None,
        app_url: Optional[str] = None,
        dry_run: bool = False,
        allow_origin: Optional[str] = "*",
    ) -> None:
        self.remote = remote
        self.menu_accessor = menu_accessor
        self.rail_accessor = rail_accessor
        self.app_url = app_url
        self.dry_run = dry_run
        self.allow_origin = allow_origin
        self._lock = asyncio.Lock()
        self._clients: set[web.WebSocketResponse] = set()

    @classmethod
    def for_page(cls, page: Any, remote: RemoteControl, **kwargs: Any) -> "BridgeServer":
        """Create a server whose menu and rail lookups read ``page``."""

        nav = NavigationBar(page)
        return cls(
            remote,
            menu_accessor=nav.focused_item_name,
            rail_accessor=lambda label: testid_focus_getter(page.get_by_label(label)),
            **kwargs,
        )

    def add_routes(self, app: web.Application) -> None:
        app.router.add_get("/status", self.handle_status)
        app.router.add_get("/ws", self.handle_websocket)
        app.on_shutdown.append(self.on_shutdown)

    async def on_shutdown(self, app: web.Application) -> None:  # pragma: no cover - exercised by aiohttp
        for ws in set(self._clients):
            await ws.close(code=1001, message=b"Server shutdown")

    def _json_response(self, data: Dict[str, Any]) -> web.Response:
        response = web.json_response(data)
        if self.allow_origin:
            response.headers["Access-Control-Allow-Origin"] = self.allow_origin
        return response

    async def handle_status(self, request: web.Request) -> web.Response:
        return self._json_response(
            {
                "status": "ok",
                "url": self.app_url,
                "menu": MENU_ITEMS.names,
                "dryRun": self.dry_run,
            }
        )

    async def handle_websocket(self, request: web.Request) -> web.StreamResponse:
        ws = web.WebSocketResponse(heartbeat=20)
        await ws.prepare(request)

        self._clients.add(ws)
        await ws.send_json({"type": "ready", "menu": MENU_ITEMS.names, "dryRun": self.dry_run})

        try:
            async for msg in ws:
                if msg.type == WSMsgType.TEXT:
                    await self._handle_ws_message(ws, msg.data)
                elif msg.type == WSMsgType.ERROR:
                    logger.error("WebSocket error: %s", ws.exception())
                    break
        finally:
            self._clients.discard(ws)
        return ws

    async def _handle_ws_message(self, ws: web.WebSocketResponse, data: str) -> None:
        try:
            payload = json.loads(data)
        except json.JSONDecodeError:
            await ws.send_json({"type": "error", "message": "Invalid JSON payload"})
            return
        if not isinstance(payload, dict):
            await ws.send_json({"type": "error", "message": "Payload must be a JSON object"})
            return

        message_type = payload.get("type")
        if not isinstance(message_type, str):
            await ws.send_json({"type": "error", "message": "Message type must be a string"})
            return
        if message_type == "ping":
            await ws.send_json({"type": "pong"})
            return
        handler = {
            "press": self._handle_press,
            "menu": self._handle_menu,
            "find": self._handle_find,
        }.get(message_type)
        if handler is None:
            await ws.send_json({"type": "error", "message": f"Unsupported message type: {message_type}"})
            return

        try:
            async with self._lock:
                result = await handler(payload)
        except (ValueError, NavigationError) as exc:
            logger.warning("%s request failed: %s", message_type, exc)
            await ws.send_json({"type": message_type, "status": "error", "message": str(exc)})
        else:
            await ws.send_json({"type": message_type, "status": "done", **result})

    async def _handle_press(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        sequence = payload.get("sequence")
        if not sequence or not isinstance(sequence, str):
            raise ValueError("Missing 'sequence'")
        actions = parse_sequence(sequence)
        logger.info("Pressing %s", sequence)
        await self.remote.perform_sequence(actions)
        return {"keys": describe(actions)}

    async def _handle_menu(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        name = payload.get("name")
        if not name:
            raise ValueError("Missing 'name'")
        if self.menu_accessor is None:
            raise ValueError("Menu navigation is not available in this session")
        focused = await resolve_menu(
            self.remote,
            self.menu_accessor,
            str(name),
            HOME_ITEM,
            MENU_ITEMS,
            _step_budget(payload, NAVIGATION_LIMITS.max_menu_steps),
        )
        return {"focused": focused}

    async def _handle_find(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        target = payload.get("target")
        rail = payload.get("rail")
        if not target or not rail:
            raise ValueError("Both 'target' and 'rail' are required")
        if self.rail_accessor is None:
            raise ValueError("Rail search is not available in this session")
        direction = Command.from_name(str(payload.get("direction", "right")))
        outcome = await search_for(
            self.remote,
            self.rail_accessor(str(rail)),
            str(target),
            direction,
            _step_budget(payload, NAVIGATION_LIMITS.max_rail_steps),
            context=f"search in {rail}",
        )
        return {"outcome": outcome.to_dict()}


BRIDGE_SERVER_KEY = web.AppKey("bridge_server", BridgeServer)


def create_app(server: BridgeServer) -> web.Application:
    """Create an aiohttp application exposing the bridge endpoints."""

    app = web.Application()
    server.add_routes(app)
    app[BRIDGE_SERVER_KEY] = server
    return app


__all__ = ["create_app", "BridgeServer", "BRIDGE_SERVER_KEY"]
