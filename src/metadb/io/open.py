import urllib.request
import urllib.error
from io import IOBase, TextIOBase, BytesIO
from typing import Union, BinaryIO, Optional, Iterable, Iterator
from pathlib import Path
from importlib import import_module
from lzma import LZMAError
from re import compile as regex, IGNORECASE


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class IndexSourceError(IOError):
    """Raised when an index source cannot be opened or read."""


# Constants ------------------------------------------------------------------------------------------------------------
# Truncated, corrupt or undecodable content is reported like an unreadable file
_READ_ERRORS = (OSError, EOFError, UnicodeDecodeError, LZMAError)


# Classes --------------------------------------------------------------------------------------------------------------
class Xopen:
    """
    Opens a local file for binary reading, decompressing it if the content is compressed.

    Examples:
        >>> with Xopen("meta.index.gz") as f:
        ...     content = f.read()
    """
    _MAGIC = {
        b'\x1f\x8b': 'gzip',
        b'\x42\x5a\x68': 'bz2',
        b'\xfd7zXZ\x00': 'lzma',
    }
    _MIN_N_BYTES = max(len(i) for i in _MAGIC.keys())
    _OPEN_FUNCS = {}

    def __init__(self, file: Union[str, Path, BinaryIO]):
        """
        Initializes the Xopen context manager.

        Args:
            file: File path (str or Path) or an existing binary file object.
        """
        self.file = file
        self._handle: Optional[BinaryIO] = None
        self._raw: Optional[BinaryIO] = None

    def __enter__(self) -> BinaryIO:
        self._handle = self._open()
        return self._handle

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Decompressors do not close the file object they wrap
        if self._handle is not None and self._handle is not self.file: self._handle.close()
        if self._raw is not None: self._raw.close()

    def _get_opener(self, pkg_name: str):
        if pkg_name not in self._OPEN_FUNCS:
            self._OPEN_FUNCS[pkg_name] = import_module(pkg_name).open
        return self._OPEN_FUNCS[pkg_name]

    def _open(self) -> BinaryIO:
        if isinstance(self.file, IOBase):
            raw_stream = self.file
        else:
            raw_stream = self._raw = open(Path(self.file).expanduser(), mode='rb')
        try:
            return self._sniff(raw_stream)
        except Exception:
            # __exit__ does not run when __enter__ raises
            if self._raw is not None: self._raw.close()
            raise

    def _sniff(self, raw_stream: BinaryIO) -> BinaryIO:
        # Non-seekable streams are buffered so the magic bytes can be sniffed
        if not raw_stream.seekable(): raw_stream = BytesIO(raw_stream.read())
        start = raw_stream.read(self._MIN_N_BYTES)
        raw_stream.seek(0)
        for magic, pkg in self._MAGIC.items():
            if start.startswith(magic): return self._get_opener(pkg)(raw_stream, mode='rb')
        return raw_stream


class RemoteSource:
    """
    Fetches an index over ``http``, ``https`` or ``ftp``.

    Examples:
        >>> lines = list(RemoteSource('https://example.org/meta.index'))
    """
    USER_AGENT = 'metadb-client/0.1'
    _URL_REGEX = regex(r'^(ftp|https?):', IGNORECASE)

    def __init__(self, url: str, timeout: float = 30.0):
        self.url = url
        self.timeout = timeout

    @classmethod
    def is_remote(cls, source) -> bool:
        """Checks whether *source* is a URL this class can fetch."""
        return isinstance(source, (str, Path)) and cls._URL_REGEX.match(str(source)) is not None

    def fetch(self) -> bytes:
        req = urllib.request.Request(self.url, headers={'User-Agent': self.USER_AGENT})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                return response.read()
        except urllib.error.HTTPError as e:
            raise IndexSourceError(f"Couldn't read {self.url}: {e.code} {e.reason}") from e
        except (urllib.error.URLError, OSError) as e:
            raise IndexSourceError(f"Couldn't read {self.url}: {getattr(e, 'reason', e)}") from e

    def __iter__(self) -> Iterator[str]:
        try:
            text = self.fetch().decode('utf-8')
        except UnicodeDecodeError as e:
            raise IndexSourceError(f"Couldn't read {self.url}: {e}") from e
        yield from text.splitlines()


# Functions ------------------------------------------------------------------------------------------------------------
def open_index(source: Union[str, Path, IOBase, Iterable[str]], timeout: float = 30.0) -> Iterator[str]:
    """
    Yields the text lines of an index source.

    Args:
        source: A local path, an ``http``/``https``/``ftp`` URL, an open text or binary
            handle, or an iterable of lines.
        timeout: Network timeout in seconds for remote sources.

    Yields:
        Lines of text (line terminators are left to the parser).

    Raises:
        IndexSourceError: If the source cannot be opened or read.

    Examples:
        >>> list(open_index(['[geneA]', 'type = gene']))
        ['[geneA]', 'type = gene']
    """
    if RemoteSource.is_remote(source):
        yield from RemoteSource(str(source), timeout)
    elif isinstance(source, (str, Path)) or (isinstance(source, IOBase) and not isinstance(source, TextIOBase)):
        try:
            with Xopen(source) as handle:
                for line in handle: yield line.decode('utf-8')
        except _READ_ERRORS as e:
            raise IndexSourceError(f"Couldn't read {source}: {getattr(e, 'strerror', None) or e}") from e
    else:
        try:
            for line in source: yield line.decode('utf-8') if isinstance(line, bytes) else line
        except _READ_ERRORS as e:
            raise IndexSourceError(f"Couldn't read {source}: {e}") from e
