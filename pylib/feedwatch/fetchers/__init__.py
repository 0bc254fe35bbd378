'''Data fetchers: proxy URL building and the HTTP transport behind it.'''

from feedwatch.fetchers.http import ProxyTransport, fetch_via_proxy, unwrap_contents
from feedwatch.fetchers.proxy import build_proxy_url

__all__ = [
    'ProxyTransport',
    'build_proxy_url',
    'fetch_via_proxy',
    'unwrap_contents',
]
