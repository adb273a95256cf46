# channelzweb

`channelzweb` is a small web interface for the gRPC *channelz* service.
It connects to a running gRPC server that exposes channelz, asks it for
its channels, subchannels, servers and sockets, and renders the answers
as plain HTML pages.

It is a WSGI application, meant to be mounted next to your own service
as an admin or debug page.

## Pages

Every page is served under `<prefix>/channelz/`:

| Path                                 | Shows                                              |
|--------------------------------------|----------------------------------------------------|
| `<prefix>/channelz/`                 | Top channels and all servers                       |
| `<prefix>/channelz/channels?start=N` | Top channels, starting at channel id `N`           |
| `<prefix>/channelz/channel/<id>`     | One channel, its children, sockets and events      |
| `<prefix>/channelz/subchannel/<id>`  | One subchannel                                     |
| `<prefix>/channelz/server/<id>`      | One server, its listen sockets and events          |
| `<prefix>/channelz/socket/<id>`      | One socket: streams, messages, flow control, options |

Pages link to each other, so you can start on the overview and follow
the ids down to individual sockets. When the channelz service reports
that the channel listing is not complete, a "Next >" link continues it.

Timestamps are shown in RFC 3339 form in UTC, for example
`1970-01-01T00:00:06Z`, and trace events as
`CT_INFO [1970-01-01T00:00:06Z]: setup`.

## Usage

`channelzweb.handler.create_handler` builds a WSGI application. Give it
the path prefix the pages should live under and the bind address of the
gRPC server to inspect. A bind address that starts with a colon, such as
`":8080"`, is dialled as `localhost:8080`.

```python
from wsgiref.simple_server import make_server

from channelzweb.handler import create_handler

app = create_handler("/foo", ":8080")

with make_server("", 8081, app) as httpd:
    httpd.serve_forever()
```

With that running, the overview is at `http://localhost:8081/foo/channelz/`.

The connection to the gRPC server is made lazily, on the first page
request, and reused afterwards.

### Credentials and channel options

`create_handler` connects without transport security. If your server
needs TLS or custom channel arguments, use
`create_handler_with_dial_opts` and pass `grpc.ChannelCredentials` and a
list of channel options:

```python
import grpc

from channelzweb.handler import create_handler_with_dial_opts

credentials = grpc.ssl_channel_credentials()
app = create_handler_with_dial_opts(
    "/admin",
    "grpc.internal.example.com:443",
    credentials,
    [("grpc.max_receive_message_length", 16 * 1024 * 1024)],
)
```

### Writing pages yourself

`channelzweb.handler.ChannelzHandler` writes complete HTML documents
into any text stream, which is handy for embedding the pages in another
web framework:

```python
import io

from channelzweb.handler import ChannelzHandler

handler = ChannelzHandler(bind_address="localhost:8080", prefix="/channelz/")
out = io.StringIO()
handler.write_channel_page(out, 2)
html = out.getvalue()
```

`prefix` is the path the links between pages start with. The other page
writers are `write_top_channels_page`, `write_channels_page`,
`write_subchannel_page`, `write_server_page` and `write_socket_page`.
If you already hold a client, pass it as `client` and no new connection
is made.

`channelzweb.routes.create_router(prefix, handler)` mounts the routes of
any object with those six methods as a WSGI application.

### Lower-level pieces

- `channelzweb.client.ChannelzClient` queries a channelz service:
  `get_top_channels`, `get_servers`, `get_channel`, `get_subchannel`,
  `get_server` and `get_socket`. A failed call raises
  `channelzweb.client.ChannelzError`. It can be used as a context
  manager, or closed with `close()`.
- `channelzweb.protos` holds the channelz data as dataclasses
  (`Channel`, `Subchannel`, `Server`, `Socket`, `TopChannels`,
  `Servers` and their parts) and the `parse_*` functions that decode
  them from protobuf wire bytes.
- `channelzweb.channel_pages` (`render_channel`, `render_channels`,
  `render_subchannel`) and `channelzweb.server_pages` (`render_server`,
  `render_servers`, `render_socket`) render those objects as HTML
  fragments without header or footer.
- `channelzweb.templates` provides `format_timestamp`,
  `create_hyperlink`, `render_header` and `render_footer`.
- `channelzweb.demo` has a tiny gRPC service for experiments:
  `create_demo_server()` returns an unstarted `grpc.Server` with a
  `Hello` method, and `DemoClient` calls it.

### Errors

A failed channelz query is logged and the page is rendered with empty
fields. An id in the URL that is not a decimal 64-bit integer is logged
and answered with an empty response. Unknown paths answer with
`404 page not found`; methods other than GET and HEAD with 405.

## What it does not do

- It does not provide the channelz service itself. The gRPC server you
  inspect must already expose it; otherwise every query fails and the
  pages stay empty. `create_demo_server` does not register it either.
- It has no command-line program: you run the WSGI application with a
  server of your choice.