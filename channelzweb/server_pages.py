"""HTML fragments for server, server list and socket pages."""

from __future__ import annotations

import functools

import jinja2

from .channel_pages import (
    _MACROS,
    _body_row,
    _environment,
    _header_row,
    _row,
    _section_title,
    _vertical_table,
)
from .protos import Server, Servers, Socket

_TRACE_TIMESTAMP = (
    "{% if {var}.data.trace %} {{ {var}.data.trace.creation_timestamp | timestamp }} {% endif %}"
)


def _trace_timestamp(var: str) -> str:
    return _TRACE_TIMESTAMP.replace("{var}", var)


_SERVER = _MACROS + _vertical_table(
    [
        _row("ServerId", "{{ server.ref.server_id }}"),
        _row("Server Name", "{{ server.ref.name }}"),
        _row("CreationTimestamp", _trace_timestamp("server")),
        _row("CallsStarted", "{{ server.data.calls_started }}"),
        _row("CallsSucceeded", "{{ server.data.calls_succeeded }}"),
        _row("CallsFailed", "{{ server.data.calls_failed }}"),
        _row("LastCallStartedTimestamp", "{{ server.data.last_call_started_timestamp | timestamp }}"),
        _row("Sockets", '{{ links(server.listen_socket, "socket", "socket_id") }}'),
        "{% if server.data.trace %}\n",
        _row("Events", "{{ events(server.data.trace) }}"),
        "{% endif %}\n",
    ]
)

_SERVER_COLUMNS = (
    "Server",
    "CreationTimestamp",
    "CallsStarted",
    "CallsSucceeded",
    "CallsFailed",
    "LastCallStartedTimestamp",
    "Sockets",
)

_SERVER_CELLS = (
    '<a href="{{ link("server", s.ref.server_id) }}"><b>{{ s.ref.server_id }}</b> {{ s.ref.name }}</a>',
    _trace_timestamp("s"),
    "{{ s.data.calls_started }}",
    "{{ s.data.calls_succeeded }}",
    "{{ s.data.calls_failed }}",
    "{{ s.data.last_call_started_timestamp | timestamp }}",
    '{{ links(s.listen_socket, "socket", "socket_id") }}',
)

_SERVERS = (
    _MACROS
    + "\n"
    + _section_title("Servers")
    + "<table frame=box cellspacing=0 cellpadding=2>\n"
    + '  <tr class="header"><th colspan=100 style="text-align:left">'
    + "Servers: {{ servers.server | length }}</th></tr>\n"
    + _header_row(_SERVER_COLUMNS)
    + "{% for s in servers.server %}\n"
    + _body_row(_SERVER_CELLS)
    + "{% if s.data.trace %}\n"
    + '  <tr class="header"><th colspan=100>Events</th></tr>\n'
    + "  <tr><td>&nbsp;</td><td colspan=100>{{ events(s.data.trace) }}</td></tr>\n"
    + "{% endif %}\n"
    + "{% endfor %}\n"
    + "</table>\n"
)

_SOCKET_COUNTERS = (
    ("StreamsStarted", "streams_started"),
    ("StreamsSucceeded", "streams_succeeded"),
    ("StreamsFailed", "streams_failed"),
    ("MessagesSent", "messages_sent"),
    ("MessagesReceived", "messages_received"),
    ("KeepAlivesSent", "keep_alives_sent"),
)

_SOCKET_TIMESTAMPS = (
    ("LastLocalStreamCreated", "last_local_stream_created_timestamp"),
    ("LastRemoteStreamCreated", "last_remote_stream_created_timestamp"),
    ("LastMessageSent", "last_message_sent_timestamp"),
    ("LastMessageReceived", "last_message_received_timestamp"),
)

_SOCKET = _MACROS + _vertical_table(
    [
        _row("SocketId", "{{ socket.ref.socket_id }}"),
        _row("Socket Name", "{{ socket.ref.name }}"),
        _row(
            "Socket Local -> Remote",
            "<pre>{{ socket.local }} -> {{ socket.remote }} "
            "{% if socket.remote_name %}({{ socket.remote_name }}){% endif %}</pre>",
        ),
        *(_row(label, "{{ socket.data." + field + " }}") for label, field in _SOCKET_COUNTERS),
        *(
            _row(label, "{{ socket.data." + field + " | timestamp }}")
            for label, field in _SOCKET_TIMESTAMPS
        ),
        _row("LocalFlowControlWindow", "{{ socket.data.local_flow_control_window }}"),
        _row("RemoteFlowControlWindow", "{{ socket.data.remote_flow_control_window }}"),
        _row(
            "Options",
            "{% for option in socket.data.option %}"
            "{{ option.name }}: {{ option.value }} "
            "{% if option.additional is not none %}({{ option.additional }}){% endif %}<br/>"
            "{% endfor %}",
        ),
        _row("Security", "{{ socket.security }}"),
    ]
)


@functools.lru_cache(maxsize=None)
def _templates(prefix: str) -> dict[str, jinja2.Template]:
    env = _environment(prefix)
    return {
        "server": env.from_string(_SERVER),
        "servers": env.from_string(_SERVERS),
        "socket": env.from_string(_SOCKET),
    }


def render_server(server: Server | None, prefix: str = "") -> str:
    """Render the details of one server as an HTML fragment."""
    return _templates(prefix)["server"].render(server=server or Server())


def render_servers(servers: Servers | None, prefix: str = "") -> str:
    """Render the list of servers as an HTML fragment."""
    return _templates(prefix)["servers"].render(servers=servers or Servers())


def render_socket(socket: Socket | None, prefix: str = "") -> str:
    """Render the details of one socket as an HTML fragment."""
    return _templates(prefix)["socket"].render(socket=socket or Socket())