"""WSGI routing for the channelz pages."""

from __future__ import annotations

import io
import logging
import re
from typing import Callable, Protocol, TextIO

from werkzeug.wrappers import Request, Response

logger = logging.getLogger(__name__)

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_DECIMAL = re.compile(r"[+-]?[0-9]+")
_HTML = "text/html; charset=utf-8"


class PageWriter(Protocol):
    """What the router needs from a page handler."""

    def write_top_channels_page(self, out: TextIO) -> None: ...

    def write_channels_page(self, out: TextIO, start: int) -> None: ...

    def write_channel_page(self, out: TextIO, channel: int) -> None: ...

    def write_subchannel_page(self, out: TextIO, subchannel: int) -> None: ...

    def write_server_page(self, out: TextIO, server: int) -> None: ...

    def write_socket_page(self, out: TextIO, socket: int) -> None: ...


def _parse_id(text: str) -> int | None:
    """Parse a decimal int64 the strict way; None when it is not one."""
    if not _DECIMAL.fullmatch(text):
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


_PATH_ROUTES = (
    (re.compile(r"/channel/([^/]+)"), "write_channel_page", "channel ID"),
    (re.compile(r"/subchannel/([^/]+)"), "write_subchannel_page", "sub-channel ID"),
    (re.compile(r"/server/([^/]+)"), "write_server_page", "server ID"),
    (re.compile(r"/socket/([^/]+)"), "write_socket_page", "socket ID"),
)


def _not_found() -> Response:
    return Response("404 page not found\n", status=404, content_type="text/plain; charset=utf-8")


class _Router:
    """WSGI application serving the channelz pages under a prefix."""

    def __init__(self, prefix: str, handler: PageWriter) -> None:
        stripped = prefix.strip("/")
        self._base = f"/{stripped}" if stripped else ""
        self._handler = handler

    def __call__(self, environ, start_response):
        response = self._dispatch(Request(environ))
        return response(environ, start_response)

    def _resolve(self, request: Request) -> Callable[[TextIO], None] | None | Response:
        path = request.path
        if not path.startswith(self._base):
            return _not_found()
        rest = path[len(self._base):]
        if rest and not rest.startswith("/"):
            return _not_found()
        handler = self._handler
        if rest in ("", "/"):
            return handler.write_top_channels_page
        if rest == "/channels":
            text = request.args.get("start", "")
            start = _parse_id(text)
            if start is None:
                logger.error("channelz: Unable to parse int for start channel ID. %s", text)
                return None
            return lambda out: handler.write_channels_page(out, start)
        for pattern, method, what in _PATH_ROUTES:
            match = pattern.fullmatch(rest)
            if match is None:
                continue
            text = match.group(1)
            ident = _parse_id(text)
            if ident is None:
                logger.error("channelz: Unable to parse int for %s. %s", what, text)
                return None
            write = getattr(handler, method)
            return lambda out: write(out, ident)
        return _not_found()

    def _dispatch(self, request: Request) -> Response:
        action = self._resolve(request)
        if isinstance(action, Response):
            return action
        if request.method not in ("GET", "HEAD"):
            return Response("", status=405)
        out = io.StringIO()
        if action is not None:
            action(out)
        return Response(out.getvalue(), status=200, content_type=_HTML)


def create_router(prefix: str, handler: PageWriter) -> _Router:
    """Create a WSGI application with the channelz routes mounted at prefix."""
    return _Router(prefix, handler)