'''
**svcutils.errors**
-----------------

The error taxonomy shared by every svcutils module. Each subsystem raises a
subclass of `SvcUtilsError` so callers can catch the whole family at once,
or a single kind when they need to react differently (e.g. retry transport
failures but never serialization failures).
'''


class SvcUtilsError(Exception):
    '''
    Base class for all svcutils errors.
    '''


class SendError(SvcUtilsError):
    '''
    Raised when a request could not be delivered to a service, either
    because the connection failed, the TLS handshake failed, the attempt
    timed out or the peer broke the HTTP protocol.

    Parameters
    ----------
    target : str
        The address (``host:port``) or reason the send failed for
    '''
    def __init__(self, target: str) -> None:
        self.target: str = target
        super().__init__(f'Error connecting to service `{target}` while sending message')


class SerializationError(SvcUtilsError, ValueError):
    '''
    Raised when a value can not be encoded to or decoded from
    JSON or TOML.

    Parent: ValueError
    '''
    def __init__(self, message: str, fmt: str = 'json') -> None:
        self.format: str = fmt
        super().__init__(message)


class TlsBootstrapError(SvcUtilsError):
    '''
    Raised when the platform trust store has no usable root certificates,
    so no TLS connection can be verified.
    '''


class DateParseError(SvcUtilsError, ValueError):
    '''
    Raised when a string does not match any supported date format.

    Parent: ValueError
    '''
    def __init__(self, value: str, supported: str = '') -> None:
        self.value: str = value
        message = f'Unsupported date format `{value}`'
        if supported:
            message += f'. Supported formats: {supported}'
        super().__init__(message)


class Base64DecodeError(SvcUtilsError, ValueError):
    '''
    Raised when a base64 payload is malformed.

    Parent: ValueError
    '''


class IoError(SvcUtilsError, OSError):
    '''
    Raised for filesystem failures other than opening a file.

    Parent: OSError
    '''


class FileOpenError(IoError):
    '''
    Raised when a file can not be opened for reading or writing.
    '''
    def __init__(self, path: str, reason: str = '') -> None:
        self.path: str = path
        message = f'Could not open file `{path}`'
        if reason:
            message += f': {reason}'
        super().__init__(message)
