'''
Percent-encoding of query values with the RFC 3986 unreserved set
(``A-Z a-z 0-9 - . _ ~``), built on `urllib.parse.quote` with no extra
safe characters. The decoder never turns ``+`` into a space.
'''
import urllib.parse

UNRESERVED = frozenset(
    b'ABCDEFGHIJKLMNOPQRSTUVWXYZ'
    b'abcdefghijklmnopqrstuvwxyz'
    b'0123456789'
    b'-._~'
)


def percent_encode(data: str | bytes) -> str:
    '''
    Escape every byte outside the unreserved set as ``%HH`` (uppercase).
    A `str` is encoded as UTF-8 first; when nothing needs escaping the
    same `str` object is handed back.

    Parameters
    ----------
    data : str | bytes

    Returns
    -------
    str
    '''
    raw = data.encode('utf-8') if isinstance(data, str) else bytes(data)

    if all(byte in UNRESERVED for byte in raw):
        return data if isinstance(data, str) else raw.decode('ascii')

    return urllib.parse.quote(raw, safe='')


def percent_decode(data: str | bytes) -> bytes:
    '''
    Decode ``%HH`` sequences. A ``%`` not followed by two hex digits
    is kept as is and ``+`` stays ``+``.

    Parameters
    ----------
    data : str | bytes

    Returns
    -------
    bytes
    '''
    return urllib.parse.unquote_to_bytes(data)


def percent_decode_str(data: str | bytes, encoding: str = 'utf-8') -> str:
    return percent_decode(data).decode(encoding, errors='replace')
