'''
Ready-made `httpx.Response` objects for services that answer HTTP
requests themselves.
'''
from typing import Any

import httpx

from svcutils.serialize import to_json_bytes

HTML_CONTENT_TYPE = 'text/html; charset=utf-8'
JSON_CONTENT_TYPE = 'application/json'


def empty_response(code: int) -> httpx.Response:
    return httpx.Response(code)


def error_response(body: str, code: int) -> httpx.Response:
    return httpx.Response(
        code,
        headers={'Content-Type': HTML_CONTENT_TYPE},
        content=body.encode('utf-8'),
    )


def error_empty_response(code: int) -> httpx.Response:
    return httpx.Response(code, headers={'Content-Type': HTML_CONTENT_TYPE})


def ok_response(text: str) -> httpx.Response:
    return httpx.Response(
        httpx.codes.OK,
        headers={'Content-Type': HTML_CONTENT_TYPE},
        content=text.encode('utf-8'),
    )


def json_response(obj: Any) -> httpx.Response:
    '''
    200 with ``obj`` serialized as JSON.

    Raises
    ------
    SerializationError
    '''
    return httpx.Response(
        httpx.codes.OK,
        headers={'Content-Type': JSON_CONTENT_TYPE},
        content=to_json_bytes(obj),
    )


def unauthorized_response() -> httpx.Response:
    return httpx.Response(httpx.codes.UNAUTHORIZED, content=b'Unauthorized')
