'''
Ingestion: the one-shot "add feed" flow.

validate -> fetch via proxy -> parse -> record feed -> merge posts.
Failures become state (phase, last_error); they never escape add_feed.
'''

from dataclasses import asdict

import structlog

from feedwatch.errors import (
    DownloadOrParseError,
    FeedwatchError,
    NetworkError,
    UrlValidationError,
    ValidationError,
)
from feedwatch.fetchers.http import ProxyTransport
from feedwatch.merger import merge_new_posts
from feedwatch.models import Feed
from feedwatch.parser import parse_feed
from feedwatch.state import AggregateState, OperationPhase
from feedwatch.validator import check_url


class Aggregator:
    '''Drives feed ingestion against a shared AggregateState.'''

    def __init__(self, state: AggregateState, transport: ProxyTransport):
        self.state = state
        self.transport = transport
        self.validation_errors: list[ValidationError] = []
        # Specific failure of the last operation, for diagnostics (the UI only sees the code)
        self.last_exception: FeedwatchError | None = None

    async def add_feed(self, url: str) -> Feed | None:
        '''
        Ingest url. Returns the new Feed on success, None on failure; either
        way state.phase ends as succeeded or failed.
        '''
        log = structlog.get_logger().bind(url=url)
        state = self.state
        state.last_error = None
        state.phase = OperationPhase.SUBMITTING
        self.validation_errors = []
        self.last_exception = None

        try:
            check_url(url, state.feed_urls())
            raw = await self.transport.fetch(url)
            parsed = parse_feed(raw)
            # Another submission of the same URL may have landed while we were fetching
            check_url(url, state.feed_urls())
        except UrlValidationError as e:
            self.validation_errors = e.errors
            log.info('feed rejected', errors=[v.value for v in e.errors])
            return self._fail(e)
        except NetworkError as e:
            log.warning('feed fetch failed', error=str(e))
            return self._fail(e)
        except DownloadOrParseError as e:
            log.warning('feed unusable', error_type=type(e).__name__, error=str(e))
            return self._fail(e)
        except Exception as e:
            log.exception('feed ingestion failed unexpectedly')
            wrapped = DownloadOrParseError(str(e))
            wrapped.__cause__ = e
            return self._fail(wrapped)

        feed = Feed(id=state.next_id(), url=url, **asdict(parsed.feed))
        state.append_feed(feed)
        # Nothing is known for a brand-new feed, so every item is new
        posts = merge_new_posts(parsed.posts, feed.id, [], state.next_id)
        state.append_posts(posts)
        state.last_error = None
        state.phase = OperationPhase.SUCCEEDED
        log.info('feed added', feed_id=feed.id, title=feed.title, posts=len(posts))
        return feed

    def _fail(self, error: FeedwatchError) -> None:
        self.last_exception = error
        self.state.last_error = error.code
        self.state.phase = OperationPhase.FAILED
        return None
