"""Channelz message types and their protobuf wire decoding."""

from __future__ import annotations

import enum
import ipaddress
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar, Iterator

from google.protobuf import any_pb2, timestamp_pb2, wrappers_pb2

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class _NamedEnum(enum.IntEnum):
    def __format__(self, spec: str) -> str:
        return format(str(self), spec)


class Severity(_NamedEnum):
    """Severity of a channel trace event."""

    CT_UNKNOWN = 0
    CT_INFO = 1
    CT_WARNING = 2
    CT_ERROR = 3

    def __str__(self) -> str:
        return self.name


class ConnectivityState(_NamedEnum):
    """Connectivity state of a channel or subchannel."""

    UNKNOWN = 0
    IDLE = 1
    CONNECTING = 2
    READY = 3
    TRANSIENT_FAILURE = 4
    SHUTDOWN = 5

    def __str__(self) -> str:
        # Printed as the state message's text form; the default prints as nothing.
        return "" if self is ConnectivityState.UNKNOWN else f"state:{self.name}"


def _read_varint(data: bytes, pos: int) -> tuple[int, int]:
    result = shift = 0
    while shift < 70:
        if pos >= len(data):
            raise ValueError("truncated varint")
        byte = data[pos]
        pos += 1
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result, pos
        shift += 7
    raise ValueError("varint too long")


def _iter_fields(data: bytes) -> Iterator[tuple[int, int, Any]]:
    pos = 0
    while pos < len(data):
        key, pos = _read_varint(data, pos)
        wire_type = key & 7
        if wire_type == 0:
            value, pos = _read_varint(data, pos)
        elif wire_type in (1, 2, 5):
            if wire_type == 2:
                size, pos = _read_varint(data, pos)
            else:
                size = 8 if wire_type == 1 else 4
            if pos + size > len(data):
                raise ValueError("truncated field")
            value, pos = data[pos:pos + size], pos + size
        else:
            raise ValueError(f"unsupported wire type {wire_type}")
        yield key >> 3, wire_type, value


def _convert(kind: Any, wire_type: int, raw: Any) -> Any:
    is_enum = isinstance(kind, type) and issubclass(kind, enum.IntEnum)
    if wire_type != (0 if kind in ("int", "bool") or is_enum else 2):
        raise ValueError(f"wire type {wire_type} does not match field kind {kind!r}")
    if kind == "int":
        raw &= (1 << 64) - 1
        return raw - (1 << 64) if raw >= 1 << 63 else raw
    if kind == "bool":
        return bool(raw)
    if kind == "str":
        return raw.decode("utf-8")
    if kind == "bytes":
        return bytes(raw)
    if kind == "timestamp":
        ts = timestamp_pb2.Timestamp.FromString(raw)
        return _EPOCH + timedelta(seconds=ts.seconds, microseconds=ts.nanos // 1000)
    if kind == "int64value":
        return wrappers_pb2.Int64Value.FromString(raw).value
    if kind == "any":
        return any_pb2.Any.FromString(raw)
    if kind == "state":
        state = ConnectivityState.UNKNOWN
        for number, inner_type, value in _iter_fields(raw):
            if number == 1:
                state = _convert(ConnectivityState, inner_type, value)
        return state
    if is_enum:
        try:
            return kind(raw)
        except ValueError:
            return raw
    return _decode(kind, raw)


def _decode(cls: type, data: bytes) -> Any:
    values: dict[str, Any] = {}
    for number, wire_type, raw in _iter_fields(data):
        spec = cls._WIRE.get(number)
        if spec is None:
            continue
        name, kind = spec
        if isinstance(kind, list):
            values.setdefault(name, []).append(_convert(kind[0], wire_type, raw))
        else:
            values[name] = _convert(kind, wire_type, raw)
    return cls(**values)


@dataclass
class ChannelRef:
    """Reference to a channel."""

    channel_id: int = 0
    name: str = ""
    _WIRE: ClassVar[dict] = {1: ("channel_id", "int"), 2: ("name", "str")}


@dataclass
class SubchannelRef:
    """Reference to a subchannel."""

    subchannel_id: int = 0
    name: str = ""
    _WIRE: ClassVar[dict] = {7: ("subchannel_id", "int"), 8: ("name", "str")}


@dataclass
class SocketRef:
    """Reference to a socket."""

    socket_id: int = 0
    name: str = ""
    _WIRE: ClassVar[dict] = {3: ("socket_id", "int"), 4: ("name", "str")}


@dataclass
class ServerRef:
    """Reference to a server."""

    server_id: int = 0
    name: str = ""
    _WIRE: ClassVar[dict] = {5: ("server_id", "int"), 6: ("name", "str")}


@dataclass
class ChannelTraceEvent:
    """One event in a channel trace."""

    description: str = ""
    severity: Severity = Severity.CT_UNKNOWN
    timestamp: datetime | None = None
    channel_ref: ChannelRef | None = None
    subchannel_ref: SubchannelRef | None = None
    _WIRE: ClassVar[dict] = {
        1: ("description", "str"), 2: ("severity", Severity), 3: ("timestamp", "timestamp"),
        4: ("channel_ref", ChannelRef), 5: ("subchannel_ref", SubchannelRef),
    }


@dataclass
class ChannelTrace:
    """Trace of a channel, subchannel or server."""

    num_events_logged: int = 0
    creation_timestamp: datetime | None = None
    events: list[ChannelTraceEvent] = field(default_factory=list)
    _WIRE: ClassVar[dict] = {
        1: ("num_events_logged", "int"), 2: ("creation_timestamp", "timestamp"),
        3: ("events", [ChannelTraceEvent]),
    }


@dataclass
class ChannelData:
    """Statistics of a channel or subchannel."""

    state: ConnectivityState | None = None
    target: str = ""
    trace: ChannelTrace | None = None
    calls_started: int = 0
    calls_succeeded: int = 0
    calls_failed: int = 0
    last_call_started_timestamp: datetime | None = None
    _WIRE: ClassVar[dict] = {
        1: ("state", "state"), 2: ("target", "str"), 3: ("trace", ChannelTrace),
        4: ("calls_started", "int"), 5: ("calls_succeeded", "int"), 6: ("calls_failed", "int"),
        7: ("last_call_started_timestamp", "timestamp"),
    }


@dataclass
class Channel:
    """A channel with its references to children."""

    ref: ChannelRef | None = None
    data: ChannelData | None = None
    channel_ref: list[ChannelRef] = field(default_factory=list)
    subchannel_ref: list[SubchannelRef] = field(default_factory=list)
    socket_ref: list[SocketRef] = field(default_factory=list)
    _WIRE: ClassVar[dict] = {
        1: ("ref", ChannelRef), 2: ("data", ChannelData), 3: ("channel_ref", [ChannelRef]),
        4: ("subchannel_ref", [SubchannelRef]), 5: ("socket_ref", [SocketRef]),
    }


@dataclass
class Subchannel:
    """A subchannel with its references to children."""

    ref: SubchannelRef | None = None
    data: ChannelData | None = None
    channel_ref: list[ChannelRef] = field(default_factory=list)
    subchannel_ref: list[SubchannelRef] = field(default_factory=list)
    socket_ref: list[SocketRef] = field(default_factory=list)
    _WIRE: ClassVar[dict] = {
        1: ("ref", SubchannelRef), 2: ("data", ChannelData), 3: ("channel_ref", [ChannelRef]),
        4: ("subchannel_ref", [SubchannelRef]), 5: ("socket_ref", [SocketRef]),
    }


@dataclass
class ServerData:
    """Statistics of a server."""

    trace: ChannelTrace | None = None
    calls_started: int = 0
    calls_succeeded: int = 0
    calls_failed: int = 0
    last_call_started_timestamp: datetime | None = None
    _WIRE: ClassVar[dict] = {
        1: ("trace", ChannelTrace), 2: ("calls_started", "int"), 3: ("calls_succeeded", "int"),
        4: ("calls_failed", "int"), 5: ("last_call_started_timestamp", "timestamp"),
    }


@dataclass
class Server:
    """A server and its listen sockets."""

    ref: ServerRef | None = None
    data: ServerData | None = None
    listen_socket: list[SocketRef] = field(default_factory=list)
    _WIRE: ClassVar[dict] = {
        1: ("ref", ServerRef), 2: ("data", ServerData), 3: ("listen_socket", [SocketRef]),
    }


@dataclass
class SocketOption:
    """A socket option with its value."""

    name: str = ""
    value: str = ""
    additional: Any = None
    _WIRE: ClassVar[dict] = {1: ("name", "str"), 2: ("value", "str"), 3: ("additional", "any")}


@dataclass
class SocketData:
    """Statistics of a socket."""

    streams_started: int = 0
    streams_succeeded: int = 0
    streams_failed: int = 0
    messages_sent: int = 0
    messages_received: int = 0
    keep_alives_sent: int = 0
    last_local_stream_created_timestamp: datetime | None = None
    last_remote_stream_created_timestamp: datetime | None = None
    last_message_sent_timestamp: datetime | None = None
    last_message_received_timestamp: datetime | None = None
    local_flow_control_window: int | None = None
    remote_flow_control_window: int | None = None
    option: list[SocketOption] = field(default_factory=list)
    _WIRE: ClassVar[dict] = {
        1: ("streams_started", "int"), 2: ("streams_succeeded", "int"),
        3: ("streams_failed", "int"), 4: ("messages_sent", "int"),
        5: ("messages_received", "int"), 6: ("keep_alives_sent", "int"),
        7: ("last_local_stream_created_timestamp", "timestamp"),
        8: ("last_remote_stream_created_timestamp", "timestamp"),
        9: ("last_message_sent_timestamp", "timestamp"),
        10: ("last_message_received_timestamp", "timestamp"),
        11: ("local_flow_control_window", "int64value"),
        12: ("remote_flow_control_window", "int64value"),
        13: ("option", [SocketOption]),
    }


@dataclass
class _TcpIpAddress:
    ip_address: bytes = b""
    port: int = 0
    _WIRE: ClassVar[dict] = {1: ("ip_address", "bytes"), 2: ("port", "int")}


@dataclass
class _UdsAddress:
    filename: str = ""
    _WIRE: ClassVar[dict] = {1: ("filename", "str")}


@dataclass
class _OtherAddress:
    name: str = ""
    value: Any = None
    _WIRE: ClassVar[dict] = {1: ("name", "str"), 2: ("value", "any")}


@dataclass
class Address:
    """Address of a socket endpoint."""

    tcpip_address: _TcpIpAddress | None = None
    uds_address: _UdsAddress | None = None
    other_address: _OtherAddress | None = None
    _WIRE: ClassVar[dict] = {
        1: ("tcpip_address", _TcpIpAddress), 2: ("uds_address", _UdsAddress),
        3: ("other_address", _OtherAddress),
    }

    def __str__(self) -> str:
        if self.tcpip_address is not None:
            raw = self.tcpip_address.ip_address
            if len(raw) in (4, 16):
                ip = ipaddress.ip_address(raw)
                host = f"[{ip}]" if ip.version == 6 else str(ip)
            else:
                host = raw.hex()
            return f"{host}:{self.tcpip_address.port}"
        if self.uds_address is not None:
            return f"unix:{self.uds_address.filename}"
        if self.other_address is not None:
            return self.other_address.name
        return ""


@dataclass
class _Tls:
    standard_name: str = ""
    other_name: str = ""
    local_certificate: bytes = b""
    remote_certificate: bytes = b""
    _WIRE: ClassVar[dict] = {
        1: ("standard_name", "str"), 2: ("other_name", "str"),
        3: ("local_certificate", "bytes"), 4: ("remote_certificate", "bytes"),
    }


@dataclass
class _OtherSecurity:
    name: str = ""
    value: Any = None
    _WIRE: ClassVar[dict] = {1: ("name", "str"), 2: ("value", "any")}


@dataclass
class Security:
    """Security details of a socket."""

    tls: _Tls | None = None
    other: _OtherSecurity | None = None
    _WIRE: ClassVar[dict] = {1: ("tls", _Tls), 2: ("other", _OtherSecurity)}

    def __str__(self) -> str:
        if self.tls is not None:
            return f"tls:{self.tls.standard_name or self.tls.other_name}"
        if self.other is not None:
            return f"other:{self.other.name}"
        return ""


@dataclass
class Socket:
    """A socket with its statistics and endpoints."""

    ref: SocketRef | None = None
    data: SocketData | None = None
    local: Address | None = None
    remote: Address | None = None
    security: Security | None = None
    remote_name: str = ""
    _WIRE: ClassVar[dict] = {
        1: ("ref", SocketRef), 2: ("data", SocketData), 3: ("local", Address),
        4: ("remote", Address), 5: ("security", Security), 6: ("remote_name", "str"),
    }


@dataclass
class TopChannels:
    """A page of top-level channels."""

    channel: list[Channel] = field(default_factory=list)
    end: bool = False
    _WIRE: ClassVar[dict] = {1: ("channel", [Channel]), 2: ("end", "bool")}


@dataclass
class Servers:
    """A page of servers."""

    server: list[Server] = field(default_factory=list)
    end: bool = False
    _WIRE: ClassVar[dict] = {1: ("server", [Server]), 2: ("end", "bool")}


def _single(cls: type, data: bytes) -> Any:
    result = cls()
    for number, wire_type, raw in _iter_fields(data):
        if number == 1:
            result = _convert(cls, wire_type, raw)
    return result


def parse_top_channels(data: bytes) -> TopChannels:
    """Decode a GetTopChannels response."""
    return _decode(TopChannels, data)


def parse_servers(data: bytes) -> Servers:
    """Decode a GetServers response."""
    return _decode(Servers, data)


def parse_channel(data: bytes) -> Channel:
    """Decode a GetChannel response into its channel."""
    return _single(Channel, data)


def parse_subchannel(data: bytes) -> Subchannel:
    """Decode a GetSubchannel response into its subchannel."""
    return _single(Subchannel, data)


def parse_server(data: bytes) -> Server:
    """Decode a GetServer response into its server."""
    return _single(Server, data)


def parse_socket(data: bytes) -> Socket:
    """Decode a GetSocket response into its socket."""
    return _single(Socket, data)


def encode_id_request(value: int) -> bytes:
    """Encode a request whose only field is an int64 id in field 1."""
    if value == 0:
        return b""
    value &= (1 << 64) - 1
    out = bytearray(b"\x08")
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)