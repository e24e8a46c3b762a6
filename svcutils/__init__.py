'''
**svcutils**
---------

Small helpers shared by our services: a retrying HTTP client
(`svcutils.http`), retry combinators (`svcutils.retry`), a date value
object (`svcutils.dates`), BLAKE3 hashing (`svcutils.hashing`), filesystem
helpers (`svcutils.io`), JSON / TOML conveniences (`svcutils.serialize`),
`exclude` and a seeded PRNG (`svcutils.rand`).
'''
from svcutils.dates import Date, DateFormat, Diff
from svcutils.errors import (
    Base64DecodeError,
    DateParseError,
    FileOpenError,
    IoError,
    SendError,
    SerializationError,
    SvcUtilsError,
    TlsBootstrapError,
)
from svcutils.exclude import exclude, exclude_by
from svcutils.hashing import Hasher
from svcutils.io import read_file_to_binary
from svcutils.rand import SimpleRand
from svcutils.retry import retry, retry_policy, retry_sync
from svcutils.serialize import (
    Serializer,
    empty_string_as_none,
    null_string_as_none,
    serialize_to_file,
)

__all__ = [
    'Date',
    'DateFormat',
    'Diff',
    'Base64DecodeError',
    'DateParseError',
    'FileOpenError',
    'IoError',
    'SendError',
    'SerializationError',
    'SvcUtilsError',
    'TlsBootstrapError',
    'exclude',
    'exclude_by',
    'Hasher',
    'read_file_to_binary',
    'SimpleRand',
    'retry',
    'retry_policy',
    'retry_sync',
    'Serializer',
    'empty_string_as_none',
    'null_string_as_none',
    'serialize_to_file',
]
