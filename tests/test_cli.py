"""Tests for CLI rendering helpers."""

from rich.console import Console

from feedwatch.cli.main import post_printer, render_feeds
from feedwatch.models import Feed, Post


def recording_console():
    return Console(record=True, width=200, color_system=None)


def add_feed(state, title="Example"):
    feed = Feed(id=state.next_id(), url=f"https://{title.lower()}.test/", title=title, link="", description="About")
    state.append_feed(feed)
    return feed


def test_render_feeds(state):
    feed = add_feed(state)
    state.append_posts([Post(id=state.next_id(), feed_id=feed.id, title="Hello", link="https://example.test/1", description="")])
    console = recording_console()
    render_feeds(console, state)
    text = console.export_text()
    assert "Example" in text
    assert "Hello" in text


def test_post_printer_prints_new_posts(state):
    feed = add_feed(state, "News")
    console = recording_console()
    state.subscribe(post_printer(console, state))
    state.append_posts([Post(id=state.next_id(), feed_id=feed.id, title="Breaking", link="https://news.test/1", description="")])
    text = console.export_text()
    assert "News: Breaking" in text
