'''CORS-bypass proxy URL construction. Pure transform; no network.'''

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from feedwatch.config import DEFAULT_PROXY_URL


def build_proxy_url(target_url: str, proxy_url: str = DEFAULT_PROXY_URL) -> str:
    '''
    Route target_url through the proxy, e.g.
    https://allorigins.hexlet.app/get?url=<encoded target>&disableCache=true
    '''
    parts = urlsplit(proxy_url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in ('url', 'disableCache')]
    query.append(('url', target_url))
    query.append(('disableCache', 'true'))
    path = parts.path or '/'
    return urlunsplit((parts.scheme, parts.netloc, path, urlencode(query), ''))
