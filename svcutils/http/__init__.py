'''
**svcutils.http**
---------

The retrying HTTP client of svcutils. `HyperClient` binds a base URL,
default headers and a `RetryPolicy`; every call opens a fresh HTTP/1.1
connection, replays the last cookie the host handed out, follows one
redirect and retries transport failures with a random delay. The module
also exposes the pieces it is built from (percent-encoding, URL assembly,
cookie store, single-attempt `dispatch`) plus one-shot JSON helpers and
response constructors for server-side use.
'''
from svcutils.http._client import HyperClient, RetryPolicy
from svcutils.http._cookies import CookieStore, default_cookie_store
from svcutils.http._encoding import percent_decode, percent_decode_str, percent_encode
from svcutils.http._models import HttpResult, RequestSpec
from svcutils.http._responses import (
    empty_response,
    error_empty_response,
    error_response,
    json_response,
    ok_response,
    unauthorized_response,
)
from svcutils.http._strict import get, post, post_with_params
from svcutils.http._transport import (
    OneShotTransport,
    authority_of,
    dial_address,
    dispatch,
    native_ssl_context,
)
from svcutils.http._url import (
    URLRejectedError,
    build_url,
    get_query,
    join_path,
    verify_http_url,
)

__all__ = [
    'HyperClient',
    'RetryPolicy',
    'CookieStore',
    'default_cookie_store',
    'percent_encode',
    'percent_decode',
    'percent_decode_str',
    'HttpResult',
    'RequestSpec',
    'empty_response',
    'error_empty_response',
    'error_response',
    'json_response',
    'ok_response',
    'unauthorized_response',
    'get',
    'post',
    'post_with_params',
    'OneShotTransport',
    'authority_of',
    'dial_address',
    'dispatch',
    'native_ssl_context',
    'URLRejectedError',
    'build_url',
    'get_query',
    'join_path',
    'verify_http_url',
]
