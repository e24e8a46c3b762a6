'''
The wire layer of the HyperClient: a one-shot HTTP/1.1 transport and the
`dispatch` routine that runs a single attempt (send, cookie refresh,
one redirect) under a hard deadline.
'''
import asyncio
import contextlib
import functools
import logging
import socket
import ssl

import httpx

from svcutils.errors import SendError, TlsBootstrapError
from svcutils.http._cookies import CookieStore
from svcutils.http._models import Exchange, HttpResult, RequestSpec

logger = logging.getLogger(__name__)

DEFAULT_CONNECT_TIMEOUT = 0.5
_DEFAULT_PORTS = {'http': 80, 'https': 443}


def default_socket_options() -> list[tuple]:
    '''
    cross platform socket options for short lived TCP connections

    Returns
    -------
    list[SockOpt]
    '''
    opts = []

    if hasattr(socket, "TCP_NODELAY"):
        opts.append((socket.IPPROTO_TCP, socket.TCP_NODELAY, 1))

    if hasattr(socket, "TCP_USER_TIMEOUT"):
        opts.append(
            (socket.IPPROTO_TCP, socket.TCP_USER_TIMEOUT, 30_000))  # 30s

    return opts


@functools.cache
def native_ssl_context() -> ssl.SSLContext:
    '''
    creates the SSL context shared by every TLS connection, backed by the
    platform trust store. Built once per process.

    - TLS 1.2 minimum, ALPN offers only http/1.1
    - hostname verification is enabled

    Returns
    -------
    ssl.SSLContext

    Raises
    ------
    TlsBootstrapError
        If the platform has no root certificates to verify peers with.
    '''
    ctx = ssl.create_default_context(purpose=ssl.Purpose.SERVER_AUTH)

    paths = ssl.get_default_verify_paths()
    if (
        paths.cafile is None
        and paths.capath is None
        and not ctx.cert_store_stats().get('x509_ca')
    ):
        raise TlsBootstrapError(
            'No native root certificates found '
            f'(openssl cafile={paths.openssl_cafile}, capath={paths.openssl_capath})'
        )

    ctx.minimum_version = ssl.TLSVersion.TLSv1_2
    ctx.maximum_version = ssl.TLSVersion.MAXIMUM_SUPPORTED

    ctx.check_hostname = True
    ctx.verify_mode = ssl.CERT_REQUIRED

    with contextlib.suppress(NotImplementedError):
        ctx.set_alpn_protocols(["http/1.1"])

    ctx.options |= ssl.OP_NO_COMPRESSION

    return ctx


def authority_of(url: str | httpx.URL) -> str:
    '''
    The lowercased ``host[:port]`` of ``url``, used as the cookie key.
    '''
    return httpx.URL(str(url)).netloc.decode('ascii').lower()


def dial_address(url: str | httpx.URL) -> str:
    '''
    The ``host:port`` actually dialed for ``url``, with ``localhost``
    replaced by ``127.0.0.1``.
    '''
    parsed = httpx.URL(str(url))
    host = '127.0.0.1' if parsed.host == 'localhost' else parsed.host
    port = parsed.port or _DEFAULT_PORTS.get(parsed.scheme, 80)
    if ':' in host:
        host = f'[{host}]'
    return f'{host}:{port}'


class OneShotTransport(httpx.AsyncBaseTransport):
    '''
    An HTTP/1.1 transport that opens a fresh connection for every
    request and never keeps it alive. TLS is only set up for https.
    '''
    def __init__(self, *, tls: bool) -> None:
        self._inner: httpx.AsyncHTTPTransport = httpx.AsyncHTTPTransport(
            http1=True,
            http2=False,
            # cleartext connections never touch the SSL context
            verify=native_ssl_context() if tls else False,
            limits=httpx.Limits(max_connections=1, max_keepalive_connections=0),
            socket_options=default_socket_options(),
            trust_env=False,
            retries=0,
        )

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == 'localhost':
            request.url = request.url.copy_with(host='127.0.0.1')
        return await self._inner.handle_async_request(request)

    async def aclose(self) -> None:
        await self._inner.aclose()


@contextlib.asynccontextmanager
async def _open_transport(url: str, transport: httpx.AsyncBaseTransport | None):
    if transport is not None:
        yield transport
        return

    one_shot = OneShotTransport(tls=httpx.URL(url).scheme == 'https')
    try:
        yield one_shot
    finally:
        await one_shot.aclose()


def _with_cookie(headers: dict[str, str], cookie: str | None) -> dict[str, str]:
    if cookie is None:
        return dict(headers)
    merged = {
        name: value for name, value in headers.items()
        if name.lower() != 'cookie'
    }
    merged['Cookie'] = cookie
    return merged


async def _exchange(
    spec: RequestSpec,
    *,
    cookie_store: CookieStore,
    transport: httpx.AsyncBaseTransport | None,
    timeout: httpx.Timeout,
) -> Exchange:
    '''
    Send ``spec`` once and read the whole body. The stored cookie for the
    target host replaces any caller supplied ``Cookie`` header.
    '''
    headers = _with_cookie(spec.headers, cookie_store.get(authority_of(spec.url)))
    request = httpx.Request(
        spec.method,
        spec.url,
        headers=headers,
        content=spec.body if spec.has_body else None,
        extensions={'timeout': timeout.as_dict()},
    )
    logger.debug(f'Sending request: {spec.method} {spec.url}, headers: {list(headers)}')

    try:
        async with _open_transport(spec.url, transport) as active:
            response = await active.handle_async_request(request)
            try:
                if response.is_stream_consumed:
                    # in-memory responses arrive already read
                    body = response.content
                else:
                    body = b''.join([chunk async for chunk in response.aiter_raw()])
            finally:
                await response.aclose()
    except httpx.TransportError as exc:
        address = dial_address(spec.url)
        logger.error(f'Error connecting to service {address} -> {exc!r}')
        raise SendError(address) from exc

    return Exchange(status=response.status_code, headers=response.headers, body=body)


def _learn_cookie(cookie_store: CookieStore, url: str, exchange: Exchange) -> bool:
    set_cookie = exchange.set_cookie
    if set_cookie is None:
        return False
    return cookie_store.learn(authority_of(url), set_cookie)


def _redirect_target(url: str, exchange: Exchange) -> str | None:
    location = exchange.location
    if not location:
        return None
    try:
        target = httpx.URL(url).join(location)
    except httpx.InvalidURL:
        logger.warning(f'Ignoring unparseable Location header: {location!r}')
        return None
    if target.scheme not in ('http', 'https') or not target.host:
        logger.warning(f'Ignoring unsupported Location header: {location!r}')
        return None
    return str(target)


async def _attempt(
    spec: RequestSpec,
    *,
    cookie_store: CookieStore,
    transport: httpx.AsyncBaseTransport | None,
    timeout: httpx.Timeout,
) -> HttpResult:
    send = functools.partial(
        _exchange,
        cookie_store=cookie_store,
        transport=transport,
        timeout=timeout,
    )

    exchange = await send(spec)

    if _learn_cookie(cookie_store, spec.url, exchange):
        logger.debug(f'Cookie changed for {authority_of(spec.url)}, sending request again')
        exchange = await send(spec)
        _learn_cookie(cookie_store, spec.url, exchange)

    if (location := _redirect_target(spec.url, exchange)) is not None:
        logger.debug(f'Following redirect {spec.url} -> {location}')
        spec = spec.redirected(location)
        exchange = await send(spec)
        _learn_cookie(cookie_store, spec.url, exchange)

    return exchange.to_result()


async def dispatch(
    spec: RequestSpec,
    *,
    cookie_store: CookieStore,
    timeout_s: float | None,
    connect_timeout_s: float = DEFAULT_CONNECT_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HttpResult:
    '''
    Run one attempt of ``spec``: dial, send, read, then at most one
    cookie refresh re-send and at most one redirect.

    Parameters
    ----------
    spec : RequestSpec
    cookie_store : CookieStore
    timeout_s : float | None
        Deadline for the whole attempt, None for no deadline
    connect_timeout_s : float, optional
        Dial timeout for each connection, by default 0.5
    transport : httpx.AsyncBaseTransport | None, optional
        Use this transport instead of a fresh connection per request,
        by default None

    Returns
    -------
    HttpResult

    Raises
    ------
    SendError
        On any transport failure or when the deadline expires.
    '''
    timeout = httpx.Timeout(timeout_s, connect=connect_timeout_s)
    try:
        async with asyncio.timeout(timeout_s):
            return await _attempt(
                spec,
                cookie_store=cookie_store,
                transport=transport,
                timeout=timeout,
            )
    except TimeoutError as exc:
        logger.error(f'Request {spec.method} {spec.url} timed out after {timeout_s}s')
        raise SendError('Connection timeout') from exc
