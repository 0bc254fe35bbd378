'''URL validation for feed submission. No side effects, no network.'''

from collections.abc import Iterable
from urllib.parse import urlsplit

from feedwatch.errors import UrlValidationError, ValidationError

ALLOWED_SCHEMES = ('http', 'https', 'ftp')


def is_absolute_url(candidate: str) -> bool:
    '''True for a syntactically valid absolute URL with a host.'''
    if any(ch.isspace() for ch in candidate):
        return False
    try:
        parts = urlsplit(candidate)
        # .port raises ValueError for non-numeric or out-of-range ports
        parts.port
    except ValueError:
        return False
    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return False
    host = parts.hostname or ''
    if not host or host.startswith('.') or '..' in host:
        return False
    return True


def validate_url(candidate: str, existing_urls: Iterable[str]) -> list[ValidationError]:
    '''
    Return every validation failure for candidate (empty list when valid).
    Blank input reports only EMPTY_URL. Duplicate matching is exact and case-sensitive.
    '''
    if candidate is None or not candidate.strip():
        return [ValidationError.EMPTY_URL]
    errors: list[ValidationError] = []
    if not is_absolute_url(candidate):
        errors.append(ValidationError.MALFORMED_URL)
    if candidate in set(existing_urls):
        errors.append(ValidationError.DUPLICATE_URL)
    return errors


def check_url(candidate: str, existing_urls: Iterable[str]) -> None:
    '''Raise UrlValidationError carrying all failures if candidate is not acceptable.'''
    errors = validate_url(candidate, existing_urls)
    if errors:
        raise UrlValidationError(errors)
