"""Shared template helpers, header and footer for the channelz pages."""

from __future__ import annotations

import functools
import posixpath
import re
from datetime import datetime, timezone

import jinja2

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_HEADER = """
<!DOCTYPE html>
<html lang="en"><head>
    <meta charset="utf-8">
    <title>{{ title }}</title>
	<style>
		body {padding: 1em}
		table {
			background-color: #fff5ee;
		}
		table.section-header {
			background-color: #eeeeff;
			font-size: x-large;
		}
		table.vertical th {
			text-align: right;
			padding-right: 1em;
		}
		tr.header {
			background-color: #eee5de;
		}
		td {
			vertical-align: top;
		}
		footer {
			padding-top: 1em;
		}
	</style>
</head>
<body>
<h1>{{ title }}</h1>
"""

_FOOTER = """
<footer>
	Channelz Spec (gRPC proposal A14)
</footer>
</body>
</html>
"""


def format_timestamp(ts: datetime | None) -> str:
    """Format a timestamp as RFC 3339 in UTC; a missing one is the epoch."""
    if ts is None:
        ts = _EPOCH
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%SZ")


def create_hyperlink(prefix: str, *args: object) -> str:
    """Join the prefix and the string or integer parts into a clean path."""
    parts = ["/" + prefix]
    for part in args:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, int) and not isinstance(part, bool):
            parts.append(str(part))
    joined = re.sub(r"/+", "/", "/".join(p for p in parts if p))
    return posixpath.normpath(joined)


def make_environment(prefix: str) -> jinja2.Environment:
    """Create a template environment with the timestamp filter and link function."""
    env = jinja2.Environment(autoescape=False, undefined=jinja2.ChainableUndefined)
    env.filters["timestamp"] = format_timestamp
    env.globals["link"] = functools.partial(create_hyperlink, prefix)
    return env


_ENV = make_environment("")


def render_header(title: str) -> str:
    """Render the page header with the given title."""
    return _ENV.from_string(_HEADER).render(title=title)


def render_footer() -> str:
    """Render the page footer."""
    return _ENV.from_string(_FOOTER).render()