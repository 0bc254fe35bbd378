'''Settings for the aggregator, read from env (optionally a .env file).'''

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_PROXY_URL = 'https://allorigins.hexlet.app/get'
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_FETCH_ATTEMPTS = 1


def _env_number(name: str, default: float, cast=float):
    raw = os.environ.get(name, '').strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f'{name} must be a number, got {raw!r}') from None
    if value <= 0:
        raise ValueError(f'{name} must be positive, got {raw!r}')
    return value


@dataclass
class FeedwatchConfig:
    '''Configuration for fetching and polling.'''

    proxy_url: str = DEFAULT_PROXY_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL  # seconds between the end of one cycle and the next
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    fetch_attempts: int = DEFAULT_FETCH_ATTEMPTS  # total tries on network failure; 1 means no retry

    @classmethod
    def from_env(cls, load_dotenv_file: bool = False) -> FeedwatchConfig:
        '''Build config from FEEDWATCH_* env vars.'''
        if load_dotenv_file:
            from dotenv import load_dotenv
            load_dotenv()
        return cls(
            proxy_url=os.environ.get('FEEDWATCH_PROXY_URL') or DEFAULT_PROXY_URL,
            poll_interval=_env_number('FEEDWATCH_POLL_INTERVAL', DEFAULT_POLL_INTERVAL),
            fetch_timeout=_env_number('FEEDWATCH_FETCH_TIMEOUT', DEFAULT_FETCH_TIMEOUT),
            fetch_attempts=_env_number('FEEDWATCH_FETCH_ATTEMPTS', DEFAULT_FETCH_ATTEMPTS, cast=int),
        )

    def override(self, proxy: str = '', interval: float = 0, timeout: float = 0, attempts: int = 0) -> FeedwatchConfig:
        '''Return a copy with any non-empty CLI values applied.'''
        return FeedwatchConfig(
            proxy_url=proxy or self.proxy_url,
            poll_interval=float(interval) if interval else self.poll_interval,
            fetch_timeout=float(timeout) if timeout else self.fetch_timeout,
            fetch_attempts=int(attempts) if attempts else self.fetch_attempts,
        )
