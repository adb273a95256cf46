from datetime import datetime, timezone

import pytest

from channelzweb.protos import (
    Address,
    ChannelTrace,
    ChannelTraceEvent,
    Security,
    Server,
    ServerData,
    ServerRef,
    Servers,
    Severity,
    Socket,
    SocketData,
    SocketOption,
    SocketRef,
)
from channelzweb.server_pages import render_server, render_servers, render_socket

TS = datetime(1970, 1, 1, 0, 0, 6, tzinfo=timezone.utc)


def make_trace():
    return ChannelTrace(
        num_events_logged=5,
        creation_timestamp=TS,
        events=[ChannelTraceEvent(description="setup", severity=Severity.CT_INFO, timestamp=TS)],
    )


def make_server(trace=True):
    return Server(
        ref=ServerRef(server_id=1, name="one"),
        data=ServerData(
            trace=make_trace() if trace else None,
            calls_started=1,
            calls_succeeded=1,
            calls_failed=0,
            last_call_started_timestamp=TS,
        ),
        listen_socket=[SocketRef(socket_id=6, name="six")],
    )


def make_socket():
    return Socket(
        ref=SocketRef(socket_id=1, name="one"),
        data=SocketData(
            streams_started=5,
            streams_succeeded=6,
            streams_failed=2,
            messages_sent=3,
            messages_received=7,
            keep_alives_sent=9,
            last_local_stream_created_timestamp=TS,
            last_remote_stream_created_timestamp=TS,
            last_message_sent_timestamp=TS,
            last_message_received_timestamp=TS,
            local_flow_control_window=6,
            remote_flow_control_window=99,
            option=[SocketOption(name="hello", value="world")],
        ),
        local=Address(),
        remote=Address(),
        security=Security(),
        remote_name="wowa",
    )


def test_server_page_contains_events():
    out = render_server(make_server())
    assert "CT_INFO [1970-01-01T00:00:06Z]: setup" in out


def test_server_page_fields():
    out = render_server(make_server())
    assert "<td>1</td>" in out
    assert "<td>one</td>" in out
    assert "<td> 1970-01-01T00:00:06Z </td>" in out


def test_server_page_socket_link_with_prefix():
    out = render_server(make_server(), "channelz")
    assert '<a href="/channelz/socket/6"><b>6</b> six</a>' in out


def test_server_page_without_trace_has_no_events():
    out = render_server(make_server(trace=False))
    assert "Events" not in out
    assert "setup" not in out


def test_server_page_for_missing_server():
    out = render_server(None)
    assert "<th>ServerId</th>" in out
    assert "Events" not in out


def test_servers_page_lists_servers():
    out = render_servers(Servers(server=[make_server()]), "channelz")
    assert "Servers: 1" in out
    assert '<a href="/channelz/server/1"><b>1</b> one</a>' in out
    assert '<a href="/channelz/socket/6"><b>6</b> six</a>' in out
    assert "CT_INFO [1970-01-01T00:00:06Z]: setup" in out


@pytest.mark.parametrize("servers", [None, Servers()])
def test_servers_page_empty(servers):
    out = render_servers(servers)
    assert "Servers: 0" in out
    assert "/server/" not in out


def test_servers_page_without_prefix_links():
    out = render_servers(Servers(server=[make_server()]))
    assert '<a href="/server/1"><b>1</b> one</a>' in out


def test_socket_page_options():
    out = render_socket(make_socket())
    assert "hello: world" in out
    assert "hello: world <br/>" in out


def test_socket_page_remote_name_and_windows():
    out = render_socket(make_socket())
    assert "(wowa)</pre>" in out
    assert "<td>99</td>" in out
    assert "<td>6</td>" in out


def test_socket_page_timestamps():
    out = render_socket(make_socket())
    assert out.count("<td>1970-01-01T00:00:06Z</td>") == 4


def test_socket_page_without_remote_name():
    sock = make_socket()
    sock.remote_name = ""
    out = render_socket(sock)
    assert "(wowa)" not in out
    assert "<pre> ->  </pre>" in out


def test_socket_page_for_missing_socket():
    out = render_socket(None)
    assert "<th>SocketId</th>" in out
    assert "hello" not in out