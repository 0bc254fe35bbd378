'''CLI for the feed aggregator: add feeds once, or add and keep polling.'''

import asyncio
import sys

import fire
import structlog
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from feedwatch.config import FeedwatchConfig
from feedwatch.fetchers.http import ProxyTransport
from feedwatch.ingest import Aggregator
from feedwatch.poller import Poller
from feedwatch.state import AggregateState, StateChange


def _configure_plain_tracebacks() -> None:
    '''Use standard Python tracebacks instead of Rich's fancy format.'''
    from structlog.contextvars import merge_contextvars
    from structlog.dev import ConsoleRenderer, plain_traceback, set_exc_info
    from structlog.processors import StackInfoRenderer, TimeStamper, add_log_level

    structlog.configure(
        processors=[
            merge_contextvars,
            add_log_level,
            StackInfoRenderer(),
            set_exc_info,
            TimeStamper(fmt='%Y-%m-%d %H:%M:%S', utc=False),
            ConsoleRenderer(exception_formatter=plain_traceback),
        ],
    )


def _build_config(proxy: str = '', interval: float = 0, timeout: float = 0, attempts: int = 0) -> FeedwatchConfig:
    '''Build FeedwatchConfig from env (and .env), with optional CLI overrides.'''
    return FeedwatchConfig.from_env(load_dotenv_file=True).override(
        proxy=proxy, interval=interval, timeout=timeout, attempts=attempts,
    )


def render_feeds(console: Console, state: AggregateState) -> None:
    '''Print tracked feeds and their posts.'''
    for feed in state.feeds:
        table = Table(title=escape(feed.title), caption=escape(feed.description) or None)
        table.add_column('#', justify='right')
        table.add_column('Title')
        table.add_column('Link', overflow='fold')
        for post in state.posts_for(feed.id):
            table.add_row(post.id, escape(post.title), escape(post.link))
        console.print(table)


def post_printer(console: Console, state: AggregateState):
    '''State listener that prints each newly discovered post.'''
    def on_change(change: StateChange) -> None:
        if change.kind != 'posts_added':
            return
        titles = {f.id: f.title for f in state.feeds}
        for post in change.payload:
            feed_title = escape(titles.get(post.feed_id, post.feed_id))
            console.print(f'[bold]{feed_title}[/bold]: {escape(post.title)}  [dim]{escape(post.link)}[/dim]')
    return on_change


async def _add_all(aggregator: Aggregator, urls: tuple[str, ...], console: Console) -> int:
    failures = 0
    for url in urls:
        feed = await aggregator.add_feed(url)
        if feed is None:
            failures += 1
            codes = [e.value for e in aggregator.validation_errors] or [aggregator.state.last_error]
            console.print(f'[red]{escape(url)}[/red]: {", ".join(codes)}')
        else:
            console.print(f'[green]added[/green] {escape(feed.title)} ({escape(url)})')
    return failures


def main() -> None:
    '''feedwatch: RSS aggregation through a CORS proxy.'''
    _configure_plain_tracebacks()
    fire.Fire({
        'add': add,
        'watch': watch,
    })


def add(*urls: str, proxy: str = '', timeout: float = 0, attempts: int = 0) -> None:
    '''
    Add feeds once and print them with their posts.
    urls: one or more feed URLs
    proxy: proxy endpoint (default from FEEDWATCH_PROXY_URL)
    timeout: per-request timeout in seconds
    attempts: total tries on network failure
    '''
    console = Console()
    config = _build_config(proxy=proxy, timeout=timeout, attempts=attempts)

    async def _run() -> int:
        state = AggregateState()
        async with ProxyTransport(config) as transport:
            failures = await _add_all(Aggregator(state, transport), urls, console)
        render_feeds(console, state)
        return failures

    failures = asyncio.run(_run())
    if failures:
        sys.exit(1)


def watch(*urls: str, interval: float = 0, proxy: str = '', timeout: float = 0, attempts: int = 0) -> None:
    '''
    Add feeds, then poll them every interval seconds until interrupted.
    interval: seconds between polls (default from FEEDWATCH_POLL_INTERVAL, 5)
    proxy, timeout, attempts: see add.
    '''
    console = Console()
    config = _build_config(proxy=proxy, interval=interval, timeout=timeout, attempts=attempts)
    console.print(Panel(f'Watching {len(urls)} feed(s) (interval={config.poll_interval}s)', title='feedwatch'))
    try:
        asyncio.run(_watch(config, urls, console))
    except KeyboardInterrupt:
        pass


async def _watch(config: FeedwatchConfig, urls: tuple[str, ...], console: Console) -> None:
    state = AggregateState()
    async with ProxyTransport(config) as transport:
        await _add_all(Aggregator(state, transport), urls, console)
        render_feeds(console, state)
        state.subscribe(post_printer(console, state))
        poller = Poller(state, transport, interval_seconds=config.poll_interval)
        await poller.start()
        try:
            while True:
                await asyncio.sleep(3600)
        except (KeyboardInterrupt, asyncio.CancelledError):
            pass
        finally:
            await poller.stop()
