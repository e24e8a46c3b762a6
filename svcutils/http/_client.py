import dataclasses as dc
import logging
import random
from collections.abc import Iterable
from typing import Any, Self

import httpx

from svcutils.errors import SendError
from svcutils.http._cookies import CookieStore, default_cookie_store
from svcutils.http._models import HttpResult, RequestSpec
from svcutils.http._transport import dispatch
from svcutils.http._url import QueryParams, build_url, join_path, verify_http_url
from svcutils.retry import retry
from svcutils.serialize import to_json_bytes

logger = logging.getLogger(__name__)

Headers = Iterable[tuple[str, str]]

_NO_BODY: Any = object()


@dc.dataclass(frozen=True, slots=True)
class RetryPolicy:
    '''
    How often and how patiently a `HyperClient` retries.

    The ``[delay_from_ms, delay_to_ms)`` range is used twice: as the
    random sleep between attempts and as the random deadline of each
    attempt. ``attempts=0`` retries forever.
    '''
    attempts: int = 3
    delay_from_ms: int = 1000
    delay_to_ms: int = 5000

    def __post_init__(self) -> None:
        if self.attempts < 0:
            raise ValueError(f'attempts must be >= 0, got {self.attempts}')
        if self.delay_from_ms < 0 or self.delay_to_ms < self.delay_from_ms:
            raise ValueError(
                f'invalid delay range [{self.delay_from_ms}, {self.delay_to_ms})'
            )

    def attempt_timeout(self) -> float:
        '''
        A deadline in seconds drawn uniformly from the delay range.
        '''
        if self.delay_to_ms == self.delay_from_ms:
            return self.delay_from_ms / 1000
        return random.uniform(self.delay_from_ms, self.delay_to_ms) / 1000

    @property
    def connect_timeout(self) -> float:
        return self.delay_to_ms / 1000


def _merge_headers(current: tuple[tuple[str, str], ...], name: str, value: str):
    kept = tuple((k, v) for k, v in current if k.lower() != name.lower())
    return kept + ((name, value),)


@dc.dataclass(frozen=True, slots=True)
class HyperClient:
    '''
    A retrying HTTP/1.1 client bound to one base URL.

    Instances are immutable, the ``with_*`` and `add_path` builders
    return modified copies, so a configured client can be shared
    freely between tasks. Every call opens its own connection; the only
    state shared between calls is the cookie store.

    >>> client = HyperClient.new('http://127.0.0.1:8080/api').add_path('items')
    >>> result = await client.get_with_params([('page', '2')])
    >>> result.status, result.body
    '''
    base_url: str
    headers: tuple[tuple[str, str], ...] = ()
    policy: RetryPolicy = dc.field(default_factory=RetryPolicy)
    path: str | None = None
    cookie_store: CookieStore | None = None
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        verify_http_url(self.base_url)

    @classmethod
    def new(cls, base_url: str) -> Self:
        return cls(base_url)

    @classmethod
    def new_with_timeout(
        cls,
        base_url: str,
        from_ms: int,
        to_ms: int,
        retries: int,
    ) -> Self:
        '''
        Parameters
        ----------
        base_url : str
        from_ms : int
            Lower bound of the retry delay and attempt deadline
        to_ms : int
            Upper bound of the retry delay and attempt deadline
        retries : int
            Number of attempts, 0 for unbounded

        Returns
        -------
        HyperClient
        '''
        return cls(
            base_url,
            policy=RetryPolicy(
                attempts=retries,
                delay_from_ms=from_ms,
                delay_to_ms=to_ms,
            ),
        )

    def with_header(self, name: str, value: str) -> Self:
        return dc.replace(self, headers=_merge_headers(self.headers, name, value))

    def with_headers(self, headers: Headers) -> Self:
        merged = self.headers
        for name, value in headers:
            merged = _merge_headers(merged, name, value)
        return dc.replace(self, headers=merged)

    def add_path(self, fragment: str) -> Self:
        path = join_path(self.path, fragment) if self.path else fragment
        return dc.replace(self, path=path)

    def with_cookie_store(self, cookie_store: CookieStore) -> Self:
        return dc.replace(self, cookie_store=cookie_store)

    def with_transport(self, transport: httpx.AsyncBaseTransport) -> Self:
        return dc.replace(self, transport=transport)

    @property
    def url(self) -> str:
        '''
        The base URL with the accumulated path, without query parameters.
        '''
        return build_url(self.base_url, self.path)

    def _build_spec(self, method: str, params: QueryParams, body: Any) -> RequestSpec:
        headers = dict(self.headers)
        payload = b''
        if body is not _NO_BODY:
            payload = to_json_bytes(body)
            if not any(name.lower() == 'content-type' for name in headers):
                headers['Content-Type'] = 'application/json'

        return RequestSpec(
            method=method,
            url=build_url(self.base_url, self.path, params),
            body=payload,
            headers=headers,
        )

    async def request(
        self,
        method: str,
        params: QueryParams = (),
        body: Any = _NO_BODY,
    ) -> HttpResult:
        '''
        Send ``method`` to the client URL, retrying transport failures
        according to the client `RetryPolicy`.

        Parameters
        ----------
        method : str
        params : Iterable[tuple[str, str]], optional
            Query parameters appended in order
        body : Any, optional
            JSON serializable request body, omitted by default

        Returns
        -------
        HttpResult
            Whatever status the server answered with, non-2xx included

        Raises
        ------
        SerializationError
            If ``body`` can not be encoded as JSON (never retried).
        SendError
            The failure of the last attempt.
        URLRejectedError
            If the assembled URL is not absolute.
        '''
        spec = self._build_spec(method.upper(), params, body)
        cookie_store = self.cookie_store
        if cookie_store is None:
            cookie_store = default_cookie_store()
        policy = self.policy

        async def attempt() -> HttpResult:
            return await dispatch(
                spec,
                cookie_store=cookie_store,
                timeout_s=policy.attempt_timeout(),
                connect_timeout_s=policy.connect_timeout,
                transport=self.transport,
            )

        try:
            return await retry(
                policy.attempts,
                policy.delay_from_ms,
                policy.delay_to_ms,
                attempt,
                retry_on=(SendError,),
            )
        except SendError as exc:
            logger.error(f'{spec.method} {spec.url} failed: {exc}')
            raise

    async def get_with_params(self, params: QueryParams = ()) -> HttpResult:
        return await self.request('GET', params=params)

    async def get_with_body(self, body: Any) -> HttpResult:
        return await self.request('GET', body=body)

    async def post_with_params(self, params: QueryParams = ()) -> HttpResult:
        return await self.request('POST', params=params)

    async def post_with_body(self, body: Any) -> HttpResult:
        return await self.request('POST', body=body)

    async def put_with_params(self, params: QueryParams = ()) -> HttpResult:
        return await self.request('PUT', params=params)

    async def put_with_body(self, body: Any) -> HttpResult:
        return await self.request('PUT', body=body)

    async def patch_with_params(self, params: QueryParams = ()) -> HttpResult:
        return await self.request('PATCH', params=params)

    async def patch_with_body(self, body: Any) -> HttpResult:
        return await self.request('PATCH', body=body)

    async def delete_with_params(self, params: QueryParams = ()) -> HttpResult:
        return await self.request('DELETE', params=params)

    async def delete_with_body(self, body: Any) -> HttpResult:
        return await self.request('DELETE', body=body)
