from datetime import datetime, timezone

import pytest

from channelzweb.channel_pages import render_channel, render_channels, render_subchannel
from channelzweb.protos import (
    Channel,
    ChannelData,
    ChannelRef,
    ChannelTrace,
    ChannelTraceEvent,
    ConnectivityState,
    Severity,
    SocketRef,
    Subchannel,
    SubchannelRef,
    TopChannels,
)

SIX_SECONDS = datetime(1970, 1, 1, 0, 0, 6, tzinfo=timezone.utc)


def mock_trace():
    return ChannelTrace(
        num_events_logged=5,
        creation_timestamp=SIX_SECONDS,
        events=[
            ChannelTraceEvent(
                description="setup", severity=Severity.CT_INFO, timestamp=SIX_SECONDS
            )
        ],
    )


def mock_data():
    return ChannelData(
        state=ConnectivityState.CONNECTING,
        target="the world",
        trace=mock_trace(),
        calls_started=1,
        calls_succeeded=2,
        calls_failed=0,
        last_call_started_timestamp=SIX_SECONDS,
    )


def mock_channel():
    return Channel(
        ref=ChannelRef(channel_id=5, name="five"),
        data=mock_data(),
        channel_ref=[ChannelRef(channel_id=7, name="seven")],
        subchannel_ref=[SubchannelRef(subchannel_id=8, name="eight")],
    )


def mock_subchannel():
    return Subchannel(
        ref=SubchannelRef(subchannel_id=4, name="four"),
        data=mock_data(),
        socket_ref=[SocketRef(socket_id=9, name="nine")],
    )


def test_channel_page_events():
    html = render_channel(mock_channel(), "")
    assert "CT_INFO [1970-01-01T00:00:06Z]: setup" in html


def test_channel_page_fields_and_links():
    html = render_channel(mock_channel(), "/channelz/")
    assert "state:CONNECTING" in html
    assert "the world" in html
    assert '<a href="/channelz/channel/7"><b>7</b> seven</a>' in html
    assert '<a href="/channelz/subchannel/8"><b>8</b> eight</a>' in html


def test_channel_page_pre_block_is_trimmed():
    html = render_channel(mock_channel(), "")
    assert "<pre>\nCT_INFO [1970-01-01T00:00:06Z]: setup</pre>" in html


def test_channel_page_without_channel_uses_epoch():
    html = render_channel(None, "")
    assert "<th>ChannelId</th>" in html
    assert "1970-01-01T00:00:00Z" in html
    assert "None" not in html


def test_channels_page_subchannel_link():
    html = render_channels(TopChannels(channel=[mock_channel()]), "")
    assert '<a href="/subchannel/8"><b>8</b> eight</a>' in html


def test_channels_page_with_prefix():
    html = render_channels(TopChannels(channel=[mock_channel()]), "/channelz/")
    assert '<a href="/channelz/subchannel/8"><b>8</b> eight</a>' in html
    assert "Top Channels: 1" in html


@pytest.mark.parametrize("end, has_next", [(False, True), (True, False)])
def test_channels_page_next_link(end, has_next):
    html = render_channels(TopChannels(channel=[mock_channel()], end=end), "/channelz/")
    assert ('<a href="/channelz/channels?start=5">Next&nbsp;&gt;</a>' in html) is has_next


def test_channels_page_next_uses_last_channel():
    second = mock_channel()
    second.ref = ChannelRef(channel_id=11, name="eleven")
    html = render_channels(TopChannels(channel=[mock_channel(), second]), "")
    assert "Top Channels: 2" in html
    assert "?start=11" in html


def test_subchannel_page_events():
    html = render_subchannel(mock_subchannel(), "")
    assert "CT_INFO [1970-01-01T00:00:06Z]: setup" in html


def test_subchannel_page_socket_link():
    html = render_subchannel(mock_subchannel(), "/channelz/")
    assert '<b><a href="/channelz/socket/9">9</b> nine</a>' in html
    assert '<a href="/channelz/subchannel/4">' in html
    assert "<b>4</b> four" in html