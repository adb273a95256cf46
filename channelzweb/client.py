"""Client for the channelz gRPC service."""

from __future__ import annotations

from typing import Any, Callable, Sequence

import grpc

from . import protos

_SERVICE = "/grpc.channelz.v1.Channelz/"


class ChannelzError(Exception):
    """Raised when a channelz query fails."""


def get_host_from_bind_address(bind_address: str) -> str:
    """Turn a bind address such as ':8080' into a dialable target."""
    return f"localhost{bind_address}" if bind_address.startswith(":") else bind_address


class ChannelzClient:
    """Queries a channelz service over gRPC."""

    def __init__(
        self,
        target: str,
        credentials: grpc.ChannelCredentials | None = None,
        options: Sequence[tuple[str, Any]] | None = None,
    ) -> None:
        opts = list(options or ())
        try:
            if credentials is not None:
                self._channel = grpc.secure_channel(target, credentials, options=opts)
            else:
                self._channel = grpc.insecure_channel(target, options=opts)
        except Exception as exc:
            raise ChannelzError(f"error dialing to {target}: {exc}") from exc

    def _call(self, method: str, ident: int, parse: Callable[[bytes], Any]) -> Any:
        stub = self._channel.unary_unary(_SERVICE + method)
        try:
            payload = stub(protos.encode_id_request(ident))
        except grpc.RpcError as exc:
            raise ChannelzError(f"error querying {method}: {exc}") from exc
        return parse(payload)

    def get_top_channels(self, start_channel_id: int = 0) -> protos.TopChannels:
        return self._call("GetTopChannels", start_channel_id, protos.parse_top_channels)

    def get_servers(self, start_server_id: int = 0) -> protos.Servers:
        return self._call("GetServers", start_server_id, protos.parse_servers)

    def get_channel(self, channel_id: int) -> protos.Channel:
        return self._call("GetChannel", channel_id, protos.parse_channel)

    def get_subchannel(self, subchannel_id: int) -> protos.Subchannel:
        return self._call("GetSubchannel", subchannel_id, protos.parse_subchannel)

    def get_server(self, server_id: int) -> protos.Server:
        return self._call("GetServer", server_id, protos.parse_server)

    def get_socket(self, socket_id: int) -> protos.Socket:
        return self._call("GetSocket", socket_id, protos.parse_socket)

    def close(self) -> None:
        self._channel.close()

    def __enter__(self) -> "ChannelzClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()