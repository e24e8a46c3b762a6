'''
**svcutils.hashing**
-----------------

BLAKE3 content hashes over raw bytes, strings and files, rendered as
base64 (the default) or hex. String inputs are normalized first: spaces
are removed and the text is lowercased, so ``"Foo Bar"`` and ``"foobar"``
hash the same.
'''
import base64
import binascii
import enum
import logging
from collections.abc import Iterable

from blake3 import blake3

from svcutils import io
from svcutils.errors import Base64DecodeError, FileOpenError

logger = logging.getLogger(__name__)


class DigestEncoding(enum.Enum):
    BASE64 = 'base64'
    HEX = 'hex'


def normalize(values: Iterable[str]) -> str:
    return ''.join(value.replace(' ', '').lower() for value in values)


class Hasher:

    @staticmethod
    def hashing(data: bytes, encoding: DigestEncoding = DigestEncoding.BASE64) -> str:
        hasher = blake3(data)
        if encoding is DigestEncoding.HEX:
            return hasher.hexdigest()
        return Hasher.from_bytes_to_base64(hasher.digest())

    @staticmethod
    def hash_from_slice(
        data: bytes | bytearray | memoryview,
        encoding: DigestEncoding = DigestEncoding.BASE64,
    ) -> str:
        return Hasher.hashing(bytes(data), encoding)

    @staticmethod
    def hash_from_string(value: str, encoding: DigestEncoding = DigestEncoding.BASE64) -> str:
        return Hasher.hash_from_strings([value], encoding)

    @staticmethod
    def hash_from_strings(
        values: Iterable[str],
        encoding: DigestEncoding = DigestEncoding.BASE64,
    ) -> str:
        '''
        Hash the normalized concatenation of ``values``.
        '''
        return Hasher.hashing(normalize(values).encode('utf-8'), encoding)

    @staticmethod
    def hash_from_path(path, encoding: DigestEncoding = DigestEncoding.BASE64) -> str | None:
        '''
        Hash a file's content.

        Returns
        -------
        str | None
            None when the file can not be read
        '''
        try:
            data = io.read_file_to_binary(path)
        except FileOpenError as exc:
            logger.warning(f'Could not hash {path}: {exc}')
            return None
        return Hasher.hashing(data, encoding)

    @staticmethod
    def from_bytes_to_base64(data: bytes) -> str:
        return base64.b64encode(data).decode('ascii')

    @staticmethod
    def from_base64(data: str | bytes) -> bytes:
        '''
        Raises
        ------
        Base64DecodeError
        '''
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise Base64DecodeError(f'Invalid base64 payload: {exc}') from exc
