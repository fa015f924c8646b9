"""HTTP API and Socket.IO push channel for facility-automation.

Thin transport over the engine: parse the request, call one engine
operation, map NotFound to 404. Each Socket.IO client is one observer on the
NotificationHub and receives the "systemData" snapshot event.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

import socketio
from aiohttp import web

from .const import SNAPSHOT_EVENT
from .core.room import ApplianceState
from .core.settings import SettingsUpdate
from .modules.occupancy import NotFound
from .runtime import FacilityRuntime

if TYPE_CHECKING:
    from .modules.notifications import Observer

_LOGGER = logging.getLogger(__name__)

RUNTIME_KEY = web.AppKey("runtime", FacilityRuntime)
SIO_KEY = web.AppKey("sio", socketio.AsyncServer)


def _error(status: int, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status)


def _int_param(request: web.Request, name: str) -> int:
    try:
        return int(request.match_info[name])
    except ValueError as err:
        raise web.HTTPBadRequest(
            text=f'{{"error": "Invalid {name}"}}', content_type="application/json"
        ) from err


async def _json_body(request: web.Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError as err:
        raise web.HTTPBadRequest(
            text='{"error": "Invalid JSON body"}', content_type="application/json"
        ) from err
    if not isinstance(body, dict):
        raise web.HTTPBadRequest(
            text='{"error": "JSON body must be an object"}', content_type="application/json"
        )
    return body


class SocketObservers:
    """Maps connected Socket.IO sessions to hub observers."""

    def __init__(self, runtime: FacilityRuntime, sio: socketio.AsyncServer) -> None:
        self._runtime = runtime
        self._sio = sio
        self._observers: dict[str, Observer] = {}
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def connected(self) -> int:
        return len(self._observers)

    @property
    def in_flight(self) -> int:
        return len(self._pending)

    def register(self) -> None:
        """Register connect/disconnect handlers on the Socket.IO server."""

        @self._sio.event
        async def connect(sid: str, environ: dict[str, Any], auth: Any = None) -> None:
            _LOGGER.info("Client connected: %s", sid)
            self.add(sid)

        @self._sio.event
        async def disconnect(sid: str, *args: Any) -> None:
            _LOGGER.info("Client disconnected: %s", sid)
            self.remove(sid)

    def add(self, sid: str) -> None:
        loop = asyncio.get_running_loop()

        def push(snapshot: dict[str, Any]) -> None:
            loop.call_soon_threadsafe(self._emit, sid, snapshot)

        self._observers[sid] = push
        self._runtime.hub.subscribe(push)

    def remove(self, sid: str) -> None:
        observer = self._observers.pop(sid, None)
        if observer is not None:
            self._runtime.hub.unsubscribe(observer)

    async def async_close(self) -> None:
        """Drop every session and cancel emits still in flight."""
        for sid in list(self._observers):
            self.remove(sid)

        pending = list(self._pending)
        for task in pending:
            task.cancel()
        for task in pending:
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._pending.clear()

    def _emit(self, sid: str, snapshot: dict[str, Any]) -> None:
        task = asyncio.create_task(self._sio.emit(SNAPSHOT_EVENT, snapshot, to=sid))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


SOCKETS_KEY = web.AppKey("sockets", SocketObservers)


class FacilityApi:
    """Request handlers for the REST API."""

    def __init__(self, runtime: FacilityRuntime) -> None:
        self._engine = runtime.engine

    def routes(self) -> list[web.RouteDef]:
        return [
            web.get("/api/system", self.get_system),
            web.get("/api/rooms/{room_id}", self.get_room),
            web.post("/api/rooms/{room_id}/occupancy", self.set_occupancy),
            web.post("/api/appliances/{appliance_id}/control", self.control_appliance),
            web.post("/api/settings", self.update_settings),
            web.post("/api/emergency-shutdown", self.emergency_shutdown),
            web.get("/api/activity-log", self.activity_log),
        ]

    async def get_system(self, request: web.Request) -> web.Response:
        return web.json_response(self._engine.get_snapshot())

    async def get_room(self, request: web.Request) -> web.Response:
        room = self._engine.get_room(_int_param(request, "room_id"))
        if isinstance(room, NotFound):
            return _error(404, room.message)
        return web.json_response(room.to_dict())

    async def set_occupancy(self, request: web.Request) -> web.Response:
        room_id = _int_param(request, "room_id")
        body = await _json_body(request)

        occupied = body.get("occupied")
        if not isinstance(occupied, bool):
            return _error(400, "occupied must be a boolean")

        room = self._engine.set_occupancy(room_id, occupied)
        if isinstance(room, NotFound):
            return _error(404, room.message)
        return web.json_response({"message": "Room occupancy updated", "room": room.to_dict()})

    async def control_appliance(self, request: web.Request) -> web.Response:
        appliance_id = _int_param(request, "appliance_id")
        body = await _json_body(request)

        try:
            state = ApplianceState(body.get("status"))
        except ValueError:
            return _error(400, "status must be 'on' or 'off'")

        appliance = self._engine.control_appliance(appliance_id, state)
        if isinstance(appliance, NotFound):
            return _error(404, appliance.message)
        return web.json_response(
            {"message": "Appliance status updated", "appliance": appliance.to_dict()}
        )

    async def update_settings(self, request: web.Request) -> web.Response:
        body = await _json_body(request)

        try:
            update = SettingsUpdate.from_dict(body)
        except ValueError as err:
            return _error(400, str(err))

        settings = self._engine.update_settings(update)
        return web.json_response({"message": "Settings updated", "settings": settings.to_dict()})

    async def emergency_shutdown(self, request: web.Request) -> web.Response:
        self._engine.emergency_shutdown()
        return web.json_response({"message": "Emergency shutdown completed"})

    async def activity_log(self, request: web.Request) -> web.Response:
        return web.json_response([e.to_dict() for e in self._engine.get_activity_log()])


def create_app(runtime: FacilityRuntime) -> web.Application:
    """Build the aiohttp application with Socket.IO attached.

    The runtime is started on application startup and stopped on cleanup.

    Args:
        runtime: The runtime to serve.

    Returns:
        The configured application.

    """
    sio = socketio.AsyncServer(async_mode="aiohttp", cors_allowed_origins="*")
    app = web.Application()
    sio.attach(app)

    app[RUNTIME_KEY] = runtime
    app[SIO_KEY] = sio

    sockets = SocketObservers(runtime, sio)
    sockets.register()
    app[SOCKETS_KEY] = sockets
    app.add_routes(FacilityApi(runtime).routes())

    async def on_startup(app: web.Application) -> None:
        await app[RUNTIME_KEY].async_start()

    async def on_cleanup(app: web.Application) -> None:
        await app[SOCKETS_KEY].async_close()
        await app[RUNTIME_KEY].async_stop()

    app.on_startup.append(on_startup)
    app.on_cleanup.append(on_cleanup)
    return app
