from datetime import datetime, timezone

from channelzweb import templates


def test_format_timestamp():
    ts = datetime(1970, 1, 1, 0, 0, 6, 7, tzinfo=timezone.utc)
    assert templates.format_timestamp(ts) == "1970-01-01T00:00:06Z"


def test_missing_timestamp_is_epoch():
    assert templates.format_timestamp(None) == "1970-01-01T00:00:00Z"


def test_create_hyperlink():
    assert templates.create_hyperlink("/channelz/", "subchannel", 8) == "/channelz/subchannel/8"
    assert templates.create_hyperlink("", "subchannel", 8) == "/subchannel/8"
    assert templates.create_hyperlink("/channelz/", "channels") == "/channelz/channels"


def test_create_hyperlink_ignores_other_types():
    assert templates.create_hyperlink("/p/", "socket", 3.5, None, 3) == "/p/socket/3"


def test_environment_has_link_and_timestamp():
    env = templates.make_environment("/prefix/channelz/")
    out = env.from_string('{{ link("server", 1) }} {{ ts | timestamp }}').render(ts=None)
    assert out == "/prefix/channelz/server/1 1970-01-01T00:00:00Z"


def test_render_header():
    html = templates.render_header("Channels")
    assert "<title>Channels</title>" in html
    assert "<h1>Channels</h1>" in html


def test_render_footer():
    html = templates.render_footer()
    assert "<footer>" in html
    assert html.rstrip().endswith("</html>")