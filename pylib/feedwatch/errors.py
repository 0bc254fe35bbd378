'''
Error taxonomy. Each error carries a stable string code for the UI layer;
codes are localization keys, not prose.
'''

from enum import Enum


class ValidationError(str, Enum):
    '''Reasons a submitted URL is rejected before any network activity.'''

    EMPTY_URL = 'urlIsRequired'
    MALFORMED_URL = 'invalidUrlFormat'
    DUPLICATE_URL = 'urlIsDuplicate'


NETWORK_ERROR = 'networkError'
DOWNLOAD_ERROR = 'urlDownloadError'


class FeedwatchError(Exception):
    '''Base for all feedwatch errors.'''

    code: str = DOWNLOAD_ERROR


class UrlValidationError(FeedwatchError):
    '''Raised when a URL fails validation. Carries every failure, not just the first.'''

    def __init__(self, errors: list[ValidationError]):
        self.errors = list(errors)
        self.code = self.errors[0].value if self.errors else ValidationError.MALFORMED_URL.value
        super().__init__(', '.join(e.value for e in self.errors))


class NetworkError(FeedwatchError):
    '''Connectivity failure while fetching (connect error, timeout, protocol error).'''

    code = NETWORK_ERROR


class DownloadOrParseError(FeedwatchError):
    '''Fetch reached the proxy but the content was unusable.'''

    code = DOWNLOAD_ERROR


class DownloadError(DownloadOrParseError):
    '''Bad HTTP status or a proxy envelope without document contents.'''


class ParseError(DownloadOrParseError):
    '''Document could not be turned into a feed.'''


class MalformedXmlError(ParseError):
    '''Input is empty or not well-formed XML.'''


class MissingElementError(ParseError):
    '''A required element (feed or item title) is absent.'''
