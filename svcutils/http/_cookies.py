'''
A deliberately small cookie memory: for each host only the last
``Set-Cookie`` header value is kept and echoed back verbatim as the
``Cookie`` header of later requests to that host.
'''
import logging
import threading

logger = logging.getLogger(__name__)


class CookieStore:
    '''
    Host keyed, last-writer-wins mapping of ``Set-Cookie`` values.
    Safe to share between threads and event loops.
    '''
    __slots__ = ('_cookies', '_lock')

    def __init__(self) -> None:
        self._cookies: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, host: str) -> str | None:
        with self._lock:
            return self._cookies.get(host)

    def learn(self, host: str, value: str) -> bool:
        '''
        Remember ``value`` for ``host``.

        Returns
        -------
        bool
            True when the stored value changed (including the first
            value seen for the host), False when it was identical
        '''
        with self._lock:
            if self._cookies.get(host) == value:
                return False
            self._cookies[host] = value

        logger.debug(f'Learned new cookie for {host}')
        return True

    def forget(self, host: str) -> None:
        with self._lock:
            self._cookies.pop(host, None)

    def clear(self) -> None:
        with self._lock:
            self._cookies.clear()

    def __contains__(self, host: object) -> bool:
        with self._lock:
            return host in self._cookies

    def __len__(self) -> int:
        with self._lock:
            return len(self._cookies)


_default_store: CookieStore | None = None
_default_store_lock = threading.Lock()


def default_cookie_store() -> CookieStore:
    '''
    The process-wide store used by every client that was not given
    its own, created on first use.
    '''
    global _default_store
    with _default_store_lock:
        if _default_store is None:
            _default_store = CookieStore()
        return _default_store
