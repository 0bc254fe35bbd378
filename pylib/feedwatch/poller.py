'''
Polling loop: refresh every tracked feed, append posts not seen before.

Best effort. A feed that fails to fetch or parse is skipped for the cycle;
the other feeds still merge and the next cycle is still scheduled.
'''

import asyncio
from dataclasses import dataclass, field

import structlog

from feedwatch.errors import FeedwatchError
from feedwatch.fetchers.http import ProxyTransport
from feedwatch.merger import merge_new_posts
from feedwatch.models import Feed
from feedwatch.parser import parse_feed
from feedwatch.scheduler import Scheduler, get_scheduler
from feedwatch.state import AggregateState


logger = structlog.get_logger()


@dataclass
class CycleReport:
    '''Outcome of one polling cycle.'''

    checked: int = 0
    new_posts: int = 0
    failed: list[str] = field(default_factory=list)  # feed ids skipped this cycle


class Poller:
    '''Re-fetches all feeds in state on a fixed delay.'''

    def __init__(
        self,
        state: AggregateState,
        transport: ProxyTransport,
        scheduler: Scheduler | None = None,
        interval_seconds: float = 5.0,
    ):
        self.state = state
        self.transport = transport
        self.scheduler = scheduler or get_scheduler(interval_seconds=interval_seconds)
        self.scheduler.schedule(self.run_cycle)

    async def run_cycle(self) -> CycleReport:
        '''One pass over the feeds tracked at the start of the cycle.'''
        feeds = self.state.feeds
        report = CycleReport(checked=len(feeds))
        results = await asyncio.gather(
            *(self._refresh(feed) for feed in feeds),
            return_exceptions=True,
        )
        for feed, result in zip(feeds, results):
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                report.failed.append(feed.id)
            else:
                report.new_posts += result
        logger.debug('poll cycle done', checked=report.checked, new_posts=report.new_posts, failed=len(report.failed))
        return report

    async def _refresh(self, feed: Feed) -> int:
        try:
            raw = await self.transport.fetch(feed.url)
            parsed = parse_feed(raw)
        except FeedwatchError as e:
            logger.warning('poll skipped feed', feed_id=feed.id, url=feed.url, error_type=type(e).__name__, error=str(e))
            raise
        except Exception:
            logger.exception('poll failed for feed', feed_id=feed.id, url=feed.url)
            raise
        # Merge and append in one step once this feed has resolved
        posts = merge_new_posts(parsed.posts, feed.id, self.state.posts_for(feed.id), self.state.next_id)
        self.state.append_posts(posts)
        if posts:
            logger.info('new posts', feed_id=feed.id, count=len(posts))
        return len(posts)

    async def start(self) -> None:
        '''Begin polling in the background. Pair with stop().'''
        await self.scheduler.start()

    async def stop(self) -> None:
        await self.scheduler.stop()

    @property
    def running(self) -> bool:
        return self.scheduler.running
