"""Pytest configuration and shared fixtures."""

from xml.sax.saxutils import escape

import httpx
import pytest

from feedwatch.config import FeedwatchConfig
from feedwatch.fetchers.http import ProxyTransport
from feedwatch.state import AggregateState


def make_rss(title, items, link="https://example.com/", description="Example feed"):
    """Build an RSS 2.0 document. items is a list of titles or (title, link, description) tuples."""
    parts = []
    for item in items:
        if isinstance(item, str):
            item = (item, "https://example.com/" + item.lower().replace(" ", "-"), f"About {item}")
        t, l, d = item
        parts.append(
            f"<item><title>{escape(t)}</title><link>{escape(l)}</link>"
            f"<description>{escape(d)}</description></item>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0"><channel>'
        f"<title>{escape(title)}</title><link>{escape(link)}</link>"
        f"<description>{escape(description)}</description>"
        + "".join(parts)
        + "</channel></rss>"
    )


class FakeProxy:
    """Stands in for the proxy service. Maps target URL -> document text or exception."""

    def __init__(self):
        self.documents = {}
        self.requests = []

    def handler(self, request):
        target = request.url.params.get("url")
        self.requests.append(target)
        doc = self.documents.get(target)
        if isinstance(doc, Exception):
            raise doc
        if isinstance(doc, httpx.Response):
            return doc
        if doc is None:
            return httpx.Response(200, json={"contents": None, "status": {"http_code": 404}})
        return httpx.Response(200, json={"contents": doc, "status": {"http_code": 200}})


@pytest.fixture
def config():
    return FeedwatchConfig(proxy_url="https://proxy.test/get", fetch_timeout=5.0, fetch_attempts=1)


@pytest.fixture
def fake_proxy():
    return FakeProxy()


@pytest.fixture
async def transport(config, fake_proxy):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_proxy.handler))
    async with ProxyTransport(config, client=client) as t:
        yield t
    await client.aclose()


@pytest.fixture
def state():
    return AggregateState()
