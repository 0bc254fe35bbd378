'''Scheduler implementations for the polling loop.'''

from feedwatch.scheduler.base import Scheduler
from feedwatch.scheduler.asyncio_loop import AsyncioLoopScheduler

__all__ = ['Scheduler', 'AsyncioLoopScheduler', 'get_scheduler']


def get_scheduler(kind: str = 'asyncio', interval_seconds: float = 5.0) -> Scheduler:
    '''
    Factory for scheduler. kind: asyncio (the only one; fixed delay after each run).
    '''
    if kind == 'asyncio':
        return AsyncioLoopScheduler(interval_seconds=interval_seconds)
    raise ValueError(f'unknown scheduler: {kind}')
