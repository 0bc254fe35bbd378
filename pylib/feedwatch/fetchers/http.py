'''HTTP transport through the CORS proxy, using httpx.'''

import httpx
import structlog
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from feedwatch.config import FeedwatchConfig
from feedwatch.errors import DownloadError, NetworkError
from feedwatch.fetchers.proxy import build_proxy_url


logger = structlog.get_logger()


def unwrap_contents(payload) -> str:
    '''Pull the proxied document out of the proxy's JSON envelope ({"contents": ...}).'''
    if not isinstance(payload, dict):
        raise DownloadError('proxy response is not a JSON object')
    contents = payload.get('contents')
    if not isinstance(contents, str):
        status = payload.get('status') or {}
        http_code = status.get('http_code') if isinstance(status, dict) else None
        raise DownloadError(f'proxy returned no contents (upstream status: {http_code})')
    return contents


class ProxyTransport:
    '''
    Fetches a target URL's body via the proxy. Async context manager; one
    httpx.AsyncClient is shared across requests.

    Connectivity failures raise NetworkError (retried up to
    config.fetch_attempts); unusable responses raise DownloadError.
    '''

    def __init__(
        self,
        config: FeedwatchConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.config = config or FeedwatchConfig()
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.fetch_timeout, follow_redirects=True)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, target_url: str) -> str:
        '''Return the raw document text for target_url.'''
        proxy_url = build_proxy_url(target_url, self.config.proxy_url)
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max(1, self.config.fetch_attempts)),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            retry=retry_if_exception_type(NetworkError),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await self._fetch_once(target_url, proxy_url)

    async def _fetch_once(self, target_url: str, proxy_url: str) -> str:
        try:
            resp = await self.client.get(proxy_url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DownloadError(f'proxy returned HTTP {e.response.status_code} for {target_url}') from e
        except httpx.TransportError as e:
            logger.debug('fetch transport error', url=target_url, error=repr(e))
            raise NetworkError(f'could not reach proxy for {target_url}: {e}') from e
        try:
            payload = resp.json()
        except ValueError as e:
            raise DownloadError(f'proxy response for {target_url} is not JSON') from e
        return unwrap_contents(payload)


async def fetch_via_proxy(target_url: str, config: FeedwatchConfig | None = None) -> str:
    '''
    Fetch one URL through the proxy with a throwaway client. Convenience for scripts.
    '''
    async with ProxyTransport(config) as transport:
        return await transport.fetch(target_url)
