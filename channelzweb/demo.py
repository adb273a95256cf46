"""A minimal demo gRPC service with a client, for trying out the pages."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Sequence

import grpc
from google.protobuf import empty_pb2

_SERVICE = "demo.DemoService"
_HELLO = f"/{_SERVICE}/Hello"
_MAX_WORKERS = 4


def _hello(request: empty_pb2.Empty, context: grpc.ServicerContext) -> empty_pb2.Empty:
    return empty_pb2.Empty()


def create_demo_server() -> grpc.Server:
    """Create a gRPC server with the demo service registered; not started."""
    server = grpc.server(ThreadPoolExecutor(max_workers=_MAX_WORKERS))
    handler = grpc.unary_unary_rpc_method_handler(
        _hello,
        request_deserializer=empty_pb2.Empty.FromString,
        response_serializer=empty_pb2.Empty.SerializeToString,
    )
    server.add_generic_rpc_handlers(
        (grpc.method_handlers_generic_handler(_SERVICE, {"Hello": handler}),)
    )
    return server


class DemoClient:
    """Client of the demo service."""

    def __init__(
        self,
        connection_string: str,
        credentials: grpc.ChannelCredentials | None = None,
        options: Sequence[tuple[str, Any]] | None = None,
    ) -> None:
        opts = list(options or ())
        if credentials is not None:
            self._channel = grpc.secure_channel(connection_string, credentials, options=opts)
        else:
            self._channel = grpc.insecure_channel(connection_string, options=opts)
        self._hello = self._channel.unary_unary(
            _HELLO,
            request_serializer=empty_pb2.Empty.SerializeToString,
            response_deserializer=empty_pb2.Empty.FromString,
        )

    def hello(self) -> empty_pb2.Empty:
        """Call Hello; raises grpc.RpcError when the call fails."""
        return self._hello(empty_pb2.Empty())

    def close(self) -> None:
        self._channel.close()

    def __enter__(self) -> "DemoClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()