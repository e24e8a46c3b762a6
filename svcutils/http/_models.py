import dataclasses as dc
import json
from typing import Any, NamedTuple

import httpx

from svcutils.errors import SerializationError


class HttpResult(NamedTuple):
    '''
    The status code and the fully read body of a response.
    '''
    status: int
    body: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        return self.body.decode('utf-8', errors='replace')

    def json(self) -> Any:
        try:
            return json.loads(self.body)
        except ValueError as exc:
            raise SerializationError(f'Invalid JSON response body: {exc}') from exc


@dc.dataclass(slots=True)
class RequestSpec:
    '''
    Everything needed to put one request on the wire. Built per attempt
    and rebuilt when a redirect changes the target.
    '''
    method: str
    url: str
    body: bytes = b''
    headers: dict[str, str] = dc.field(default_factory=dict)

    @property
    def has_body(self) -> bool:
        return bool(self.body) or self.method in ('POST', 'PUT', 'PATCH')

    def redirected(self, location: str) -> 'RequestSpec':
        '''
        The follow-up request for a ``Location`` header, always a ``GET``
        without a body.
        '''
        headers = {
            name: value for name, value in self.headers.items()
            if name.lower() not in ('content-type', 'content-length')
        }
        return RequestSpec(method='GET', url=location, headers=headers)


@dc.dataclass(slots=True)
class Exchange:
    '''
    One request/response round-trip.
    '''
    status: int
    headers: httpx.Headers
    body: bytes

    @property
    def set_cookie(self) -> str | None:
        values = self.headers.get_list('set-cookie')
        return values[-1] if values else None

    @property
    def location(self) -> str | None:
        return self.headers.get('location')

    def to_result(self) -> HttpResult:
        return HttpResult(self.status, self.body)
