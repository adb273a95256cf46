from concurrent import futures

import grpc
import pytest

from channelzweb.client import ChannelzClient, ChannelzError, get_host_from_bind_address


def _msg(num, payload):
    return bytes([(num << 3) | 2, len(payload)]) + payload


@pytest.fixture
def service():
    received = []

    def get_channel(request, context):
        received.append(request)
        return _msg(1, _msg(1, b"\x08\x05" + _msg(2, b"five")))

    handler = grpc.method_handlers_generic_handler(
        "grpc.channelz.v1.Channelz",
        {"GetChannel": grpc.unary_unary_rpc_method_handler(get_channel)},
    )
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=2))
    server.add_generic_rpc_handlers((handler,))
    port = server.add_insecure_port("localhost:0")
    server.start()
    yield f"localhost:{port}", received
    server.stop(None)


def test_host_from_bind_address():
    assert get_host_from_bind_address(":8080") == "localhost:8080"
    assert get_host_from_bind_address("example.com:8080") == "example.com:8080"


def test_get_channel(service):
    target, received = service
    with ChannelzClient(target) as client:
        channel = client.get_channel(5)
    assert channel.ref.channel_id == 5
    assert channel.ref.name == "five"
    assert received == [b"\x08\x05"]


def test_unimplemented_method_raises(service):
    target, _ = service
    with ChannelzClient(target) as client:
        with pytest.raises(ChannelzError):
            client.get_socket(1)