"""Websocket endpoint that agents connect to, with request/response correlation."""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any, Callable, Optional

from aiohttp import WSMsgType, web

from .protocol import Event, Message, MessageType, Request, RequestType, Response

log = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30.0
EVENT_QUEUE_SIZE = 1024


class WechatError(Exception):
    """Raised when a request to the agent cannot be completed."""


def _split_addr(addr: str) -> tuple[str, int]:
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address: {addr!r}")
    return host.strip("[]") or "0.0.0.0", int(port)


def _peer_addr(request: web.Request) -> str:
    transport = request.transport
    peer = transport.get_extra_info("peername") if transport is not None else None
    if isinstance(peer, tuple) and len(peer) >= 2:
        return f"{peer[0]}:{peer[1]}"
    return request.remote or "unknown"


class WechatService:
    """Accepts agent connections and routes requests, responses and events."""

    def __init__(self, addr: str, secret: str, *, request_timeout: float = REQUEST_TIMEOUT):
        self.addr = addr
        self.secret = secret
        self.request_timeout = request_timeout
        self._connections: dict[str, Callable[[str], Any]] = {}
        self._pending: dict[int, asyncio.Future] = {}
        self._ids = itertools.count(1)
        self._subscribers: list[asyncio.Queue] = []

    def subscribe_events(self) -> asyncio.Queue:
        """Return a queue that receives every event delivered by an agent."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=EVENT_QUEUE_SIZE)
        self._subscribers.append(queue)
        return queue

    def unsubscribe_events(self, queue: asyncio.Queue) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def _publish(self, event: Event) -> None:
        for queue in self._subscribers:
            if queue.full():
                # A lagging subscriber loses its oldest event.
                queue.get_nowait()
            queue.put_nowait(event)

    def attach(self, addr: str, send: Callable[[str], Any]) -> None:
        """Register an agent connection; ``send`` takes one JSON text frame."""
        self._connections[addr] = send

    def detach(self, addr: str) -> None:
        self._connections.pop(addr, None)

    def _connection(self) -> Optional[Callable[[str], Any]]:
        return next(iter(self._connections.values()), None)

    async def request(self, mxid: str, request: Request) -> Response:
        """Send a request to the agent and wait for its response."""
        msg_id = next(self._ids)
        future = asyncio.get_running_loop().create_future()
        self._pending[msg_id] = future

        send = self._connection()
        if send is None:
            self._pending.pop(msg_id, None)
            raise WechatError("no agent connection available")

        try:
            send(Message.request(msg_id, mxid, request).to_json())
        except Exception as exc:
            self._pending.pop(msg_id, None)
            raise WechatError(f"failed to send request: {exc}") from exc

        try:
            return await asyncio.wait_for(future, self.request_timeout)
        except asyncio.TimeoutError:
            raise WechatError("request timeout") from None
        finally:
            self._pending.pop(msg_id, None)

    def handle_json_message(self, text: str) -> None:
        """Dispatch one frame from an agent; malformed frames are ignored."""
        try:
            message = Message.from_json(text)
        except ValueError:
            return

        if message.msg_type is MessageType.REQUEST:
            request = message.as_request()
            if request is None or request.request_type is not RequestType.EVENT:
                return
            if request.data is None:
                return
            try:
                event = Event.from_dict(request.data)
            except ValueError:
                return
            self._publish(event)
        else:
            response = message.as_response()
            if response is None:
                return
            future = self._pending.pop(message.id, None)
            if future is not None and not future.done():
                future.set_result(response)

    def is_authorized(self, header: Optional[str]) -> bool:
        return header is not None and header.startswith("Basic ") and header[6:] == self.secret

    async def websocket_handler(self, request: web.Request) -> web.StreamResponse:
        if not self.is_authorized(request.headers.get("Authorization")):
            raise web.HTTPForbidden()

        addr = _peer_addr(request)
        outgoing: asyncio.Queue = asyncio.Queue()
        ws = web.WebSocketResponse()
        self.attach(addr, outgoing.put_nowait)
        writer: Optional[asyncio.Task] = None
        try:
            await ws.prepare(request)
            log.info("Agent connected from %s", addr)
            writer = asyncio.create_task(self._pump(ws, outgoing))
            async for frame in ws:
                if frame.type is WSMsgType.TEXT:
                    self.handle_json_message(frame.data)
                elif frame.type is WSMsgType.ERROR:
                    log.warning("WebSocket error: %s", ws.exception())
                    break
        finally:
            self.detach(addr)
            if writer is not None:
                writer.cancel()
            log.info("Agent disconnected from %s", addr)
        return ws

    @staticmethod
    async def _pump(ws: web.WebSocketResponse, outgoing: asyncio.Queue) -> None:
        while True:
            text = await outgoing.get()
            try:
                await ws.send_str(text)
            except (ConnectionError, RuntimeError):
                await ws.close()
                return

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/", self.websocket_handler)
        return app

    async def start(self) -> None:
        """Serve agent connections on ``addr`` until cancelled."""
        host, port = _split_addr(self.addr)
        runner = web.AppRunner(self.make_app())
        await runner.setup()
        try:
            await web.TCPSite(runner, host, port).start()
            log.info("WeChat service listening on %s", self.addr)
            await asyncio.Event().wait()
        finally:
            await runner.cleanup()