'''
Shared aggregate state: tracked feeds, discovered posts, and the status of
the current user-initiated ingestion.

Collaborators (renderers, the CLI) subscribe to change descriptors instead
of watching the containers. Feeds and posts are append-only.
'''

import itertools
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from feedwatch.models import Feed, Post


logger = structlog.get_logger()


class OperationPhase(str, Enum):
    IDLE = 'idle'
    SUBMITTING = 'submitting'
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'


@dataclass(frozen=True)
class StateChange:
    '''
    Describes one mutation. kind is one of:
    feed_added (payload: Feed), posts_added (tuple of Post),
    phase_changed (OperationPhase), error_changed (str code or None).
    '''

    kind: str
    payload: Any


Listener = Callable[[StateChange], None]


class AggregateState:
    '''Process-wide container for feeds and posts. One instance per engine.'''

    def __init__(self) -> None:
        self._feeds: list[Feed] = []
        self._posts: list[Post] = []
        self._phase = OperationPhase.IDLE
        self._last_error: str | None = None
        self._listeners: list[Listener] = []
        self._ids = itertools.count(1)

    @property
    def feeds(self) -> tuple[Feed, ...]:
        return tuple(self._feeds)

    @property
    def posts(self) -> tuple[Post, ...]:
        return tuple(self._posts)

    @property
    def phase(self) -> OperationPhase:
        return self._phase

    @phase.setter
    def phase(self, value: OperationPhase) -> None:
        if value is self._phase:
            return
        self._phase = value
        self._notify(StateChange('phase_changed', value))

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @last_error.setter
    def last_error(self, value: str | None) -> None:
        if value == self._last_error:
            return
        self._last_error = value
        self._notify(StateChange('error_changed', value))

    def next_id(self) -> str:
        '''Fresh identity, unique within this state for feeds and posts alike.'''
        return str(next(self._ids))

    def feed_urls(self) -> set[str]:
        return {f.url for f in self._feeds}

    def posts_for(self, feed_id: str) -> list[Post]:
        return [p for p in self._posts if p.feed_id == feed_id]

    def append_feed(self, feed: Feed) -> None:
        if feed.url in self.feed_urls():
            raise ValueError(f'feed already tracked: {feed.url}')
        self._feeds.append(feed)
        self._notify(StateChange('feed_added', feed))

    def append_posts(self, posts: Iterable[Post]) -> None:
        '''Append a batch in one step. Every post must belong to a tracked feed.'''
        batch = tuple(posts)
        if not batch:
            return
        known = {f.id for f in self._feeds}
        orphans = [p.id for p in batch if p.feed_id not in known]
        if orphans:
            raise ValueError(f'posts reference untracked feeds: {orphans}')
        self._posts.extend(batch)
        self._notify(StateChange('posts_added', batch))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        '''Register listener for change descriptors. Returns an unsubscribe callable.'''
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self, change: StateChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception('state listener failed', kind=change.kind)
