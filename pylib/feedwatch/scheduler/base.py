'''Scheduler abstraction for the polling loop.'''

from abc import ABC, abstractmethod
from collections.abc import Callable, Coroutine
from typing import Any


class Scheduler(ABC):
    '''Abstract scheduler. Run a callback repeatedly; implementations define the cadence.'''

    @abstractmethod
    async def start(self) -> None:
        '''Start the scheduler.'''

    @abstractmethod
    async def stop(self) -> None:
        '''Stop the scheduler. Cancellation handle for clean shutdown.'''

    @abstractmethod
    def schedule(
        self,
        callback: Callable[..., Coroutine[Any, Any, Any]],
        *args: Any,
        **kwargs: Any,
    ) -> None:
        '''Register a callback to run on the schedule.'''

    @property
    @abstractmethod
    def running(self) -> bool:
        '''True between start() and stop().'''
