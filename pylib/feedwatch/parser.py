'''
Feed document parsing with feedparser. Pure transform: text in, records out.

Only the title/link/description triple is kept, for the channel and for
each item. Malformed markup fails fast instead of falling back to
feedparser's lenient parser.
'''

import io
from xml.sax import SAXException

import feedparser

from feedwatch.errors import MalformedXmlError, MissingElementError
from feedwatch.models import FeedFields, ParsedFeed, PostFields

# The proxy hands us decoded text; declare UTF-8 so an encoding in the XML
# prolog does not re-decode it.
_RESPONSE_HEADERS = {'content-type': 'application/xml; charset=utf-8'}


def _text(value) -> str:
    return (value or '').strip()


def parse_feed(raw_xml: str) -> ParsedFeed:
    '''
    Parse an RSS/Atom document into one feed record and its posts.

    Raises MalformedXmlError for empty or non-well-formed input and
    MissingElementError when the channel or an item has no title. Missing
    link/description become empty strings.
    '''
    if not raw_xml or not raw_xml.strip():
        raise MalformedXmlError('document is empty')

    # A stream keeps feedparser from treating URL-like text as something to fetch
    parsed = feedparser.parse(io.BytesIO(raw_xml.encode('utf-8')), response_headers=_RESPONSE_HEADERS)
    exc = parsed.get('bozo_exception')
    if parsed.get('bozo') and isinstance(exc, SAXException):
        raise MalformedXmlError(f'malformed XML: {exc}') from exc

    channel = parsed.feed
    if channel.get('title') is None:
        raise MissingElementError('feed has no title element')
    feed = FeedFields(
        title=_text(channel.get('title')),
        link=_text(channel.get('link')),
        description=_text(channel.get('description')),
    )

    posts = []
    for index, entry in enumerate(parsed.entries):
        if entry.get('title') is None:
            raise MissingElementError(f'item {index} has no title element')
        posts.append(PostFields(
            title=_text(entry.get('title')),
            link=_text(entry.get('link')),
            description=_text(entry.get('description')),
        ))
    return ParsedFeed(feed=feed, posts=tuple(posts))
