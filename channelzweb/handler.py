"""Page handler that queries a channelz service and writes HTML pages."""

from __future__ import annotations

import logging
import posixpath
import threading
from typing import Any, Callable, Sequence, TextIO

import grpc

from .channel_pages import render_channel, render_channels, render_subchannel
from .client import ChannelzClient, ChannelzError, get_host_from_bind_address
from .routes import create_router
from .server_pages import render_server, render_servers, render_socket
from .templates import render_footer, render_header

logger = logging.getLogger(__name__)


class ChannelzHandler:
    """Writes channelz HTML pages using data from a channelz service."""

    def __init__(
        self,
        bind_address: str = "",
        client: Any = None,
        prefix: str = "",
        credentials: grpc.ChannelCredentials | None = None,
        options: Sequence[tuple[str, Any]] | None = None,
    ) -> None:
        self.bind_address = bind_address
        self.prefix = prefix
        self._client = client
        self._credentials = credentials
        self._options = list(options or ())
        self._lock = threading.Lock()

    def connect(self) -> Any:
        """Return the channelz client, creating it on first use."""
        with self._lock:
            if self._client is None:
                host = get_host_from_bind_address(self.bind_address)
                self._client = ChannelzClient(host, self._credentials, self._options)
            return self._client

    def _query(self, call: Callable[[Any], Any]) -> Any:
        try:
            return call(self.connect())
        except ChannelzError as exc:
            logger.error("channelz: %s", exc)
            return None

    def _page(self, out: TextIO, title: str, *bodies: str) -> None:
        out.write(render_header(title))
        for body in bodies:
            out.write(body)
        out.write(render_footer())

    def write_top_channels_page(self, out: TextIO) -> None:
        """Write the top channels and servers, with header and footer."""
        channels = render_channels(self._query(lambda c: c.get_top_channels(0)), self.prefix)
        servers = render_servers(self._query(lambda c: c.get_servers(0)), self.prefix)
        self._page(out, "ChannelZ Stats", channels, servers)

    def write_channels_page(self, out: TextIO, start: int) -> None:
        """Write a page of top channels starting at the given channel id."""
        top = self._query(lambda c: c.get_top_channels(start))
        self._page(out, "Channels", render_channels(top, self.prefix))

    def write_channel_page(self, out: TextIO, channel: int) -> None:
        """Write the page of one channel."""
        data = self._query(lambda c: c.get_channel(channel))
        self._page(out, f"ChannelZ channel {channel}", render_channel(data, self.prefix))

    def write_subchannel_page(self, out: TextIO, subchannel: int) -> None:
        """Write the page of one subchannel."""
        data = self._query(lambda c: c.get_subchannel(subchannel))
        self._page(out, f"ChannelZ subchannel {subchannel}", render_subchannel(data, self.prefix))

    def write_server_page(self, out: TextIO, server: int) -> None:
        """Write the page of one server."""
        data = self._query(lambda c: c.get_server(server))
        self._page(out, f"ChannelZ server {server}", render_server(data, self.prefix))

    def write_socket_page(self, out: TextIO, socket: int) -> None:
        """Write the page of one socket."""
        data = self._query(lambda c: c.get_socket(socket))
        self._page(out, f"ChannelZ socket {socket}", render_socket(data, self.prefix))


def create_handler(path_prefix: str, grpc_bind_address: str):
    """Create a WSGI app serving channelz pages under path_prefix + '/channelz'."""
    return create_handler_with_dial_opts(path_prefix, grpc_bind_address)


def create_handler_with_dial_opts(
    path_prefix: str,
    grpc_bind_address: str,
    credentials: grpc.ChannelCredentials | None = None,
    options: Sequence[tuple[str, Any]] | None = None,
):
    """Like create_handler, with custom channel credentials and options."""
    prefix = posixpath.normpath(posixpath.join(path_prefix, "channelz")) + "/"
    handler = ChannelzHandler(
        grpc_bind_address, prefix=prefix, credentials=credentials, options=options
    )
    return create_router(prefix, handler)