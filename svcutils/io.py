'''
**svcutils.io**
------------

Filesystem helpers: whole-file reads and writes with encoding detection
(UTF-8, then Windows-1251), recursive copies, directory listings and
single-``*`` file masks.
'''
import logging
import os
import shutil
from pathlib import Path

from svcutils.errors import FileOpenError, IoError

logger = logging.getLogger(__name__)

FALLBACK_ENCODINGS = ('utf-8', 'windows-1251')

PathLike = str | os.PathLike


def read_file_to_binary(path: PathLike) -> bytes:
    '''
    Raises
    ------
    FileOpenError
    '''
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as exc:
        raise FileOpenError(str(path), exc.strerror or str(exc)) from exc


def detect_encoding(data: bytes) -> str | None:
    '''
    The first of `FALLBACK_ENCODINGS` that decodes ``data``, or None.
    '''
    for encoding in FALLBACK_ENCODINGS:
        try:
            data.decode(encoding)
        except UnicodeDecodeError:
            continue
        return encoding
    return None


def read_file_to_string(path: PathLike, encoding: str | None = None) -> str:
    '''
    Read a text file. Without an explicit ``encoding`` UTF-8 is tried
    first and Windows-1251 second.

    Parameters
    ----------
    path : str | os.PathLike
    encoding : str | None, optional
        by default None (auto-detect)

    Returns
    -------
    str

    Raises
    ------
    FileOpenError
        If the file can not be read.
    IoError
        If the content can not be decoded.
    '''
    data = read_file_to_binary(path)

    encoding = encoding or detect_encoding(data)
    if encoding is None:
        raise IoError(f'Could not detect the encoding of `{path}`')

    try:
        return data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as exc:
        raise IoError(f'Could not decode `{path}` as {encoding}: {exc}') from exc


def write_string_to_file(path: PathLike, text: str, encoding: str = 'utf-8') -> None:
    '''
    Write ``text`` to ``path``, creating missing parent directories.

    Raises
    ------
    FileOpenError
    '''
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding=encoding) as f:
            f.write(text)
    except OSError as exc:
        logger.error(f'Could not write {path}: {exc}')
        raise FileOpenError(str(path), exc.strerror or str(exc)) from exc


def copy_recursive(source: PathLike, destination: PathLike) -> Path:
    '''
    Copy a file or a whole directory tree. Existing files in the
    destination are overwritten.

    Returns
    -------
    Path
        The destination

    Raises
    ------
    IoError
    '''
    source, destination = Path(source), Path(destination)
    try:
        if source.is_dir():
            shutil.copytree(source, destination, dirs_exist_ok=True)
        else:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, destination)
    except (OSError, shutil.Error) as exc:
        raise IoError(f'Could not copy `{source}` to `{destination}`: {exc}') from exc

    logger.debug(f'Copied {source} -> {destination}')
    return destination


def _scan(directory: PathLike, *, dirs: bool, recursive: bool) -> list[Path]:
    root = Path(directory)
    if not root.is_dir():
        raise IoError(f'`{root}` is not a directory')

    entries = root.rglob('*') if recursive else root.iterdir()
    try:
        return sorted(
            entry for entry in entries
            if (entry.is_dir() if dirs else entry.is_file())
        )
    except OSError as exc:
        raise IoError(f'Could not list `{root}`: {exc}') from exc


def get_files(directory: PathLike, recursive: bool = False) -> list[Path]:
    return _scan(directory, dirs=False, recursive=recursive)


def get_dirs(directory: PathLike, recursive: bool = False) -> list[Path]:
    return _scan(directory, dirs=True, recursive=recursive)


def mask_matches(name: str, mask: str) -> bool:
    '''
    Match ``name`` against a mask holding at most one ``*``:
    ``prefix*``, ``*suffix``, ``prefix*suffix`` or an exact name.

    >>> mask_matches('report.csv', '*.csv')
    True
    '''
    if '*' not in mask:
        return name == mask

    prefix, _, suffix = mask.partition('*')
    return (
        len(name) >= len(prefix) + len(suffix)
        and name.startswith(prefix)
        and name.endswith(suffix)
    )


def get_files_by_mask(directory: PathLike, mask: str, recursive: bool = False) -> list[Path]:
    return [
        path for path in get_files(directory, recursive=recursive)
        if mask_matches(path.name, mask)
    ]
