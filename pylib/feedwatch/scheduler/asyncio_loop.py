'''Fixed-delay recurring scheduler on asyncio.'''

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

import structlog

from feedwatch.scheduler.base import Scheduler


class AsyncioLoopScheduler(Scheduler):
    '''
    Runs a callback, waits interval_seconds after it finishes, repeats.
    The delay counts from the end of each run, so drift accumulates.
    '''

    def __init__(self, interval_seconds: float = 5.0) -> None:
        self._interval = interval_seconds
        self._callback: Callable[..., Coroutine[Any, Any, Any]] | None = None
        self._args: tuple[Any, ...] = ()
        self._kwargs: dict[str, Any] = {}
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()
        self.runs = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(
        self,
        callback: Callable[..., Coroutine[Any, Any, Any]],
        *args: Any,
        **kwargs: Any,
    ) -> None:
        self._callback = callback
        self._args = args
        self._kwargs = kwargs

    async def start(self) -> None:
        if not self._callback:
            raise RuntimeError('No callback scheduled; call schedule() first')
        if self.running:
            raise RuntimeError('Scheduler already running')
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run_loop())

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _run_loop(self) -> None:
        log = structlog.get_logger()
        while not self._stop_event.is_set():
            try:
                await self._callback(*self._args, **self._kwargs)
            except Exception:
                # Log but don't crash the loop
                log.exception('scheduler callback failed')
            self.runs += 1
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass
