"""HTML fragments for channel, channel list and subchannel pages."""

from __future__ import annotations

import functools
from typing import Any, Iterable

import jinja2

from .protos import Channel, Subchannel, TopChannels
from .templates import format_timestamp, make_environment

# Shared macros: lists of links to referenced entities and a trace event log.
_MACROS = """
{%- macro links(refs, kind, key) -%}
{%- for ref in refs %}
<a href="{{ link(kind, ref[key]) }}"><b>{{ ref[key] }}</b> {{ ref.name }}</a><br/>
{%- endfor -%}
{%- endmacro -%}
{%- macro bold_links(refs, kind, key) -%}
{%- for ref in refs %}
<b><a href="{{ link(kind, ref[key]) }}">{{ ref[key] }}</b> {{ ref.name }}</a><br/>
{%- endfor -%}
{%- endmacro -%}
{%- macro events(trace) -%}
<pre>
{%- for event in trace.events %}
{{ event.severity }} [{{ event.timestamp | timestamp }}]: {{ event.description }}
{%- endfor -%}
</pre>
{%- endmacro -%}
"""


def _row(label: str, cell: str, td_attrs: str = "") -> str:
    return f"  <tr><th>{label}</th><td{td_attrs}>{cell}</td></tr>\n"


def _vertical_table(rows: Iterable[str]) -> str:
    return (
        '\n<table frame=box cellspacing=0 cellpadding=2 class="vertical">\n'
        + "".join(rows)
        + "</table>\n"
    )


def _header_row(labels: Iterable[str]) -> str:
    return '  <tr class="header">' + "".join(f"<th>{label}</th>" for label in labels) + "</tr>\n"


def _body_row(cells: Iterable[str]) -> str:
    return "  <tr>" + "".join(f"<td>{cell}</td>" for cell in cells) + "</tr>\n"


def _section_title(title: str) -> str:
    return (
        '<p><table class="section-header" width=100%><tr align=center>'
        f"<td>{title}</td></tr></table></p>\n"
    )


def _channel_detail_rows(var: str) -> list[str]:
    data = f"{var}.data"
    return [
        _row("State", "{{ " + data + ".state }}"),
        _row("Target", "{{ " + data + ".target }}"),
    ]


def _call_stat_rows(data: str) -> list[str]:
    return [
        _row("CreationTimestamp", "{{ " + data + ".trace.creation_timestamp | timestamp }}"),
        _row("CallsStarted", "{{ " + data + ".calls_started }}"),
        _row("CallsSucceeded", "{{ " + data + ".calls_succeeded }}"),
        _row("CallsFailed", "{{ " + data + ".calls_failed }}"),
        _row("LastCallStartedTimestamp", "{{ " + data + ".last_call_started_timestamp | timestamp }}"),
    ]


_CHANNEL = _MACROS + _vertical_table(
    [
        _row("ChannelId", "{{ channel.ref.channel_id }}"),
        _row("Channel Name", "{{ channel.ref.name }}"),
        *_channel_detail_rows("channel"),
        _row("Subchannels", '{{ links(channel.subchannel_ref, "subchannel", "subchannel_id") }}'),
        _row("Child Channels", '{{ links(channel.channel_ref, "channel", "channel_id") }}'),
        _row("Sockets", '{{ links(channel.socket_ref, "socket", "socket_id") }}'),
        *_call_stat_rows("channel.data"),
        _row("Events", "{{ events(channel.data.trace) }}"),
    ]
)

_CHANNEL_COLUMNS = (
    "Channel",
    "State",
    "Target",
    "Subchannels",
    "Child Channels",
    "Sockets",
    "CreationTimestamp",
    "CallsStarted",
    "CallsSucceeded",
    "CallsFailed",
    "LastCallStartedTimestamp",
)

_CHANNEL_CELLS = (
    '<a href="{{ link("channel", c.ref.channel_id) }}"><b>{{ c.ref.channel_id }}</b> {{ c.ref.name }}</a>',
    "{{ c.data.state }}",
    "{{ c.data.target }}",
    '{{ links(c.subchannel_ref, "subchannel", "subchannel_id") }}',
    '{{ links(c.channel_ref, "channel", "channel_id") }}',
    '{{ links(c.socket_ref, "socket", "socket_id") }}',
    "{{ c.data.trace.creation_timestamp | timestamp }}",
    "{{ c.data.calls_started }}",
    "{{ c.data.calls_succeeded }}",
    "{{ c.data.calls_failed }}",
    "{{ c.data.last_call_started_timestamp | timestamp }}",
)

_CHANNELS = (
    _MACROS
    + "\n"
    + _section_title("Clients")
    + "<table frame=box cellspacing=0 cellpadding=2>\n"
    + '  <tr class="header"><th colspan=100 style="text-align:left">'
    + "Top Channels: {{ top_channels.channel | length }}</th></tr>\n"
    + _header_row(_CHANNEL_COLUMNS)
    + "{% for c in top_channels.channel %}\n"
    + _body_row(_CHANNEL_CELLS)
    + "{% endfor %}\n"
    + "{% set last = top_channels.channel | last if top_channels.channel else none %}\n"
    + "{% if not top_channels.end %}\n"
    + '  <tr><th colspan=100 style="text-align:left">'
    + '<a href="{{ link("channels") }}?start={{ last.ref.channel_id }}">Next&nbsp;&gt;</a>'
    + "</th></tr>\n"
    + "{% endif %}\n"
    + "</table>\n<br/>\n<br/>\n"
)

_SUBCHANNEL = _MACROS + _vertical_table(
    [
        _row(
            "Subchannel",
            '<a href="{{ link("subchannel", subchannel.ref.subchannel_id) }}">'
            "<b>{{ subchannel.ref.subchannel_id }}</b> {{ subchannel.ref.name }}</a>",
        ),
        *_channel_detail_rows("subchannel"),
        *_call_stat_rows("subchannel.data"),
        _row("Child Channels", '{{ bold_links(subchannel.channel_ref, "channel", "channel_id") }}'),
        _row(
            "Child Subchannels",
            '{{ bold_links(subchannel.subchannel_ref, "subchannel", "subchannel_id") }}',
        ),
        _row("Socket", '{{ bold_links(subchannel.socket_ref, "socket", "socket_id") }}'),
        _row("Events", "{{ events(subchannel.data.trace) }}", " colspan=100"),
    ]
)


def _timestamp(value: Any) -> str:
    if isinstance(value, jinja2.Undefined):
        value = None
    return format_timestamp(value)


def _finalize(value: Any) -> Any:
    return "" if value is None else value


def _environment(prefix: str) -> jinja2.Environment:
    env = make_environment(prefix)
    env.filters["timestamp"] = _timestamp
    env.finalize = _finalize
    return env


@functools.lru_cache(maxsize=None)
def _templates(prefix: str) -> dict[str, jinja2.Template]:
    env = _environment(prefix)
    return {
        "channel": env.from_string(_CHANNEL),
        "channels": env.from_string(_CHANNELS),
        "subchannel": env.from_string(_SUBCHANNEL),
    }


def render_channel(channel: Channel | None, prefix: str = "") -> str:
    """Render the details of one channel as an HTML fragment."""
    return _templates(prefix)["channel"].render(channel=channel or Channel())


def render_channels(top_channels: TopChannels | None, prefix: str = "") -> str:
    """Render a page of top-level channels as an HTML fragment."""
    return _templates(prefix)["channels"].render(
        top_channels=top_channels or TopChannels()
    )


def render_subchannel(subchannel: Subchannel | None, prefix: str = "") -> str:
    """Render the details of one subchannel as an HTML fragment."""
    return _templates(prefix)["subchannel"].render(subchannel=subchannel or Subchannel())