'''
**svcutils.serialize**
-------------------

JSON / TOML conveniences: one `serialize` / `deserialize` pair switched by
a `Serializer`, file variants of both, and the small converters used when
reading loosely typed payloads (``""`` or ``"null"`` meaning "absent").
'''
import dataclasses as dc
import enum
import json
import logging
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import tomli_w

from svcutils import io
from svcutils.dates import Date
from svcutils.errors import SerializationError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Serializer(enum.Enum):
    JSON = 'json'
    TOML = 'toml'


def _json_default(obj: Any) -> Any:
    to_json = getattr(obj, 'to_json', None)
    if callable(to_json):
        return to_json()
    if dc.is_dataclass(obj) and not isinstance(obj, type):
        return dc.asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f'Object of type {type(obj).__name__} is not JSON serializable')


def to_json_bytes(obj: Any) -> bytes:
    '''
    Compact UTF-8 JSON for request bodies.

    Raises
    ------
    SerializationError
    '''
    return serialize(obj, Serializer.JSON).encode('utf-8')


def serialize(obj: Any, serializer: Serializer = Serializer.JSON, *, pretty: bool = False) -> str:
    '''
    Encode ``obj`` as JSON or TOML. Dataclasses and objects with a
    ``to_json()`` method (e.g. `Date`) are supported for both.

    Parameters
    ----------
    obj : Any
    serializer : Serializer, optional
        by default Serializer.JSON
    pretty : bool, optional
        Indent JSON output, by default False

    Returns
    -------
    str

    Raises
    ------
    SerializationError
    '''
    try:
        if serializer is Serializer.JSON:
            if pretty:
                return json.dumps(obj, default=_json_default, ensure_ascii=False, indent=2)
            return json.dumps(
                obj,
                default=_json_default,
                ensure_ascii=False,
                separators=(',', ':'),
            )
        plain = json.loads(json.dumps(obj, default=_json_default))
        if not isinstance(plain, dict):
            raise TypeError('a TOML document must be a table')
        return tomli_w.dumps(plain)
    except (TypeError, ValueError) as exc:
        raise SerializationError(
            f'Could not serialize {type(obj).__name__} to {serializer.value}: {exc}',
            fmt=serializer.value,
        ) from exc


def deserialize(data: str | bytes, serializer: Serializer = Serializer.JSON) -> Any:
    '''
    Decode JSON or TOML text.

    Raises
    ------
    SerializationError
    '''
    try:
        if serializer is Serializer.JSON:
            return json.loads(data)
        if isinstance(data, bytes):
            data = data.decode('utf-8')
        return tomllib.loads(data)
    except (ValueError, UnicodeDecodeError) as exc:
        raise SerializationError(
            f'Could not deserialize {serializer.value}: {exc}',
            fmt=serializer.value,
        ) from exc


def serialize_to_file(
    obj: Any,
    file_name: str,
    directory: str | Path | None = None,
    serializer: Serializer = Serializer.JSON,
) -> Path:
    '''
    Write ``obj`` (pretty printed) to ``directory/file_name``, the current
    working directory being the default.

    Returns
    -------
    Path
        The written file

    Raises
    ------
    SerializationError
    FileOpenError
    '''
    path = Path(directory) if directory is not None else Path.cwd()
    path = path / file_name

    try:
        text = serialize(obj, serializer, pretty=True)
    except SerializationError as exc:
        logger.error(f'{exc}')
        raise

    io.write_string_to_file(path, text)
    return path


def deserialize_from_file(path: str | Path, serializer: Serializer | None = None) -> Any:
    '''
    Read and decode a file. Without an explicit ``serializer`` the file
    extension decides (``.toml`` or JSON otherwise).
    '''
    if serializer is None:
        suffix = Path(path).suffix.lower()
        serializer = Serializer.TOML if suffix == '.toml' else Serializer.JSON
    return deserialize(io.read_file_to_string(path), serializer)


def empty_string_as_none(value: str | None, convert: Callable[[str], T] = str) -> T | None:
    '''
    ``None`` for a missing or empty string, otherwise ``convert(value)``.

    Raises
    ------
    SerializationError
        If ``convert`` rejects the value.
    '''
    if value is None or value == '':
        return None
    return _convert(value, convert)


def null_string_as_none(value: str | None, convert: Callable[[str], T] = str) -> T | None:
    '''
    ``None`` for a missing value or the literal ``null`` / ``NULL``,
    otherwise ``convert(value)``.
    '''
    if value is None or value in ('null', 'NULL'):
        return None
    return _convert(value, convert)


def _convert(value: str, convert: Callable[[str], T]) -> T:
    try:
        return convert(value)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f'Invalid value {value!r}: {exc}') from exc


def deserialize_date(value: str) -> Date:
    '''
    Raises
    ------
    SerializationError
        If ``value`` is not in a supported date format.
    '''
    date = Date.parse(value)
    if date is None:
        raise SerializationError(f'Unsupported date format `{value}`')
    return date
