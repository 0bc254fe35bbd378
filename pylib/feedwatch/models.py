'''Feed and post records. All immutable once created.'''

from dataclasses import dataclass


@dataclass(frozen=True)
class FeedFields:
    '''Channel-level fields extracted by the parser, before identity is assigned.'''

    title: str
    link: str = ''
    description: str = ''


@dataclass(frozen=True)
class PostFields:
    '''Item-level fields extracted by the parser.'''

    title: str
    link: str = ''
    description: str = ''


@dataclass(frozen=True)
class ParsedFeed:
    feed: FeedFields
    posts: tuple[PostFields, ...]


@dataclass(frozen=True)
class Feed:
    '''A subscribed source. url is unique across tracked feeds.'''

    id: str
    url: str
    title: str
    link: str
    description: str


@dataclass(frozen=True)
class Post:
    '''One item of a feed. feed_id refers to the owning Feed.'''

    id: str
    feed_id: str
    title: str
    link: str
    description: str
