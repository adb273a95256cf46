"""A WSGI web UI that renders gRPC channelz data as HTML pages."""

__version__ = "0.1.0"