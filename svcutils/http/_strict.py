'''
One-off JSON helpers for calling internal services without building a
`HyperClient`: a single attempt, a 500 ms dial timeout, and the reply body
decoded as JSON.
'''
import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

import httpx

from svcutils.errors import SendError
from svcutils.http._cookies import CookieStore, default_cookie_store
from svcutils.http._models import HttpResult, RequestSpec
from svcutils.http._transport import DEFAULT_CONNECT_TIMEOUT, dial_address, dispatch
from svcutils.http._url import verify_http_url
from svcutils.serialize import to_json_bytes

logger = logging.getLogger(__name__)

O = TypeVar('O')

Decoder = Callable[[Any], O]


async def _send_once(
    spec: RequestSpec,
    cookie_store: CookieStore | None,
    transport: httpx.AsyncBaseTransport | None,
) -> HttpResult:
    verify_http_url(spec.url)
    logger.debug(f'Sending request to {spec.url}, headers: {list(spec.headers)}')
    return await dispatch(
        spec,
        cookie_store=cookie_store if cookie_store is not None else default_cookie_store(),
        timeout_s=None,
        connect_timeout_s=DEFAULT_CONNECT_TIMEOUT,
        transport=transport,
    )


def _decode(result: HttpResult, decode: Decoder | None) -> Any:
    data = result.json()
    return decode(data) if decode is not None else data


async def get(
    url: str,
    *,
    decode: Decoder | None = None,
    headers: Mapping[str, str] | None = None,
    cookie_store: CookieStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    '''
    GET ``url`` and decode the JSON reply.

    Parameters
    ----------
    url : str
    decode : Callable[[Any], O] | None, optional
        Applied to the decoded JSON (e.g. a dataclass constructor),
        by default None
    headers : Mapping[str, str] | None, optional

    Returns
    -------
    Any | O

    Raises
    ------
    SendError
        On transport failure or any status other than 200.
    SerializationError
        If the body is not valid JSON.
    '''
    spec = RequestSpec('GET', url, headers=dict(headers or {}))
    result = await _send_once(spec, cookie_store, transport)

    if result.status != httpx.codes.OK:
        address = dial_address(url)
        logger.error(f'Error fetching information from service {address} -> {result.status}')
        raise SendError(f'{address} -> {result.status}')

    return _decode(result, decode)


async def post(
    url: str,
    obj: Any,
    *,
    decode: Decoder | None = None,
    headers: Mapping[str, str] | None = None,
    cookie_store: CookieStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    '''
    POST ``obj`` as JSON to ``url`` and decode the JSON reply, whatever
    the status code.
    '''
    spec = RequestSpec(
        'POST',
        url,
        body=to_json_bytes(obj),
        headers={'Content-Type': 'application/json', **(headers or {})},
    )
    result = await _send_once(spec, cookie_store, transport)
    return _decode(result, decode)


async def post_with_params(
    url: str,
    *,
    decode: Decoder | None = None,
    headers: Mapping[str, str] | None = None,
    cookie_store: CookieStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    '''
    POST to ``url`` without a body (parameters travel in the query string)
    and decode the JSON reply.
    '''
    spec = RequestSpec('POST', url, headers=dict(headers or {}))
    result = await _send_once(spec, cookie_store, transport)
    return _decode(result, decode)
