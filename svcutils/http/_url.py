import logging
import urllib.parse
from collections.abc import Iterable

import httpx

from svcutils.http._encoding import percent_encode

logger = logging.getLogger(__name__)

QueryParams = Iterable[tuple[str, str]]


class URLRejectedError(ValueError):
    '''
    Raised when an assembled URL lacks a scheme or an authority.

    Parent: ValueError
    '''


def verify_http_url(url: str) -> httpx.URL:
    '''
    Parse ``url`` and make sure it is absolute (scheme + host).

    Parameters
    ----------
    url : str

    Returns
    -------
    httpx.URL

    Raises
    ------
    URLRejectedError
        If the URL is malformed or relative.
    '''
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise URLRejectedError(f'Rejected malformed URL: {url!r}') from exc

    if parsed.scheme not in ('http', 'https'):
        raise URLRejectedError(f'Rejected unsupported URL scheme: {parsed.scheme!r}')

    if not parsed.host:
        raise URLRejectedError(f'Rejected URL without authority: {url!r}')

    return parsed


def join_path(base: str, fragment: str) -> str:
    '''
    Join ``fragment`` onto ``base`` with exactly one ``/`` between them.

    >>> join_path('http://h/api/', '/items')
    'http://h/api/items'
    '''
    if not fragment:
        return base
    return f"{base.rstrip('/')}/{fragment.lstrip('/')}"


def encode_query(params: QueryParams) -> str:
    '''
    ``k1=v1&k2=v2`` in input order, values percent-encoded, keys verbatim.
    '''
    return '&'.join(f'{key}={percent_encode(value)}' for key, value in params)


def build_url(
    base: str,
    path: str | None = None,
    params: QueryParams = (),
) -> str:
    '''
    Assemble the effective request URL from the base URL, an optional
    path fragment and query parameters. Duplicate keys are kept in order.

    Parameters
    ----------
    base : str
    path : str | None, optional
    params : Iterable[tuple[str, str]], optional

    Returns
    -------
    str

    Raises
    ------
    URLRejectedError
        If the result has no scheme or authority.
    '''
    url = join_path(base, path) if path else base
    params = list(params)

    if params:
        if '?' in url:
            # the base already carries a query, extend it
            separator = '' if url.endswith(('?', '&')) else '&'
            url = f'{url}{separator}{encode_query(params)}'
        else:
            if url.endswith('/'):
                url = url[:-1]
            url = f'{url}?{encode_query(params)}'

    verify_http_url(url)
    return url


def get_query(url: str | httpx.URL) -> dict[str, str] | None:
    '''
    Decode the query string of ``url`` into a mapping, the last value
    wins for repeated keys.

    Returns
    -------
    dict[str, str] | None
        None when the URL has no query string
    '''
    query = urllib.parse.urlsplit(str(url)).query
    if not query:
        return None
    return dict(urllib.parse.parse_qsl(query, keep_blank_values=True))
