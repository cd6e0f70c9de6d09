"""
Overlay of index metadata on the features of an external feature store.
"""
from pathlib import Path
from threading import Lock
from typing import Iterable, Mapping, Optional, Union
from warnings import warn
import logging

from metadb.containers.attributes import AttributeTable
from metadb.io import open_index, parse
from metadb.query import MergingIterator, filter_by_type, filter_by_name, filter_by_attribute
from metadb.utils.protocols import FeatureStore, StoreRecord, EditableFeature


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class MetaDBError(Exception):
    """Raised when a MetaDB is misconfigured or its store cannot serve a request."""

class MetaDBWarning(Warning): pass


# Constants ------------------------------------------------------------------------------------------------------------
logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------
class MetaDB:
    """
    Overrides the type, source, name and attributes of store features with an index file.

    The index is read lazily: the first query (or an explicit ``load``) parses it
    into an ``AttributeTable`` which is then kept, frozen, for the life of the
    instance. Queries select candidate names from that table, then stream the
    matching features from the store with the metadata applied.

    Args:
        store: The feature store to overlay.
        index: The index source: a path, an ``http``/``https``/``ftp`` URL, an open
            handle or an iterable of lines.
        feature_type: The type assumed for features whose metadata has none, and
            requested from the store's streams. Defaults to the store's own
            ``feature_type``; if neither is given, ``DEFAULT_FEATURE_TYPE`` is used
            for type queries only and the store's streams are not filtered by type.
        timeout: Network timeout in seconds for remote indexes.

    Raises:
        MetaDBError: If *store* or *index* is missing.

    Examples:
        >>> meta = MetaDB(store, 'meta.index')
        >>> features = meta.features('gene')
        >>> stream = meta.get_seq_stream(seq_id='I', attributes={'foo': 'bar'})
        >>> while (f := stream.next_seq()) is not None:
        ...     print(f.display_name)
    """
    DEFAULT_FEATURE_TYPE = 'summary'

    def __init__(self, store: FeatureStore, index: Union[str, Path, Iterable[str]], feature_type: str = None,
                 timeout: float = 30.0):
        if store is None: raise MetaDBError(f'{self.__class__.__name__}(): store argument required')
        if index is None or (isinstance(index, (str, Path)) and not str(index)):
            raise MetaDBError(f'{self.__class__.__name__}(): index argument required')
        self._store = store
        self._index = index
        # Only a type the caller or the store declares is requested from the store's streams
        self.stream_type: Optional[str] = feature_type or getattr(store, 'feature_type', None)
        self.feature_type: str = self.stream_type or self.DEFAULT_FEATURE_TYPE
        self.timeout = timeout
        self._table: Optional[AttributeTable] = None
        self._lock = Lock()

    def __repr__(self): return f"<MetaDB: {self._index!r} over {self._store!r}>"

    @property
    def store(self) -> FeatureStore: return self._store
    @property
    def index(self): return self._index
    @property
    def loaded(self) -> bool: return self._table is not None

    def load(self) -> AttributeTable:
        """
        Reads and parses the index, exactly once per instance.

        Concurrent callers wait for the first build; later calls return the cached
        table. A failed read leaves the instance unloaded so the error surfaces again
        on the next call.

        Returns:
            The frozen ``AttributeTable``.

        Raises:
            IndexSourceError: If the index cannot be read.
        """
        if self._table is not None: return self._table
        with self._lock:
            if self._table is None:
                logger.debug('Loading metadata index %r', self._index)
                table = parse(open_index(self._index, timeout=self.timeout))
                if not table: warn(f'Metadata index {self._index!r} defines no features', MetaDBWarning)
                self._table = table
        return self._table

    @property
    def meta(self) -> AttributeTable:
        """Returns the attribute table, loading it on first access."""
        return self.load()

    def get_feature(self, name: str) -> Optional[StoreRecord]:
        """Returns the first store record named *name*, or ``None``."""
        return next(iter(self._store.get_features_by_name(name)), None)

    def get_seq_stream(self, type_: Union[str, Iterable[str]] = None, *, types: Union[str, Iterable[str]] = None,
                       seq_id: str = None, start: int = None, end: int = None, name: str = None,
                       attributes: Mapping[str, Union[str, Iterable[str]]] = None) -> MergingIterator:
        """
        Returns a lazy stream of store features with metadata applied.

        Candidate names are narrowed by type, then attributes, then name; each filter
        is skipped when its criterion is not given. The location options are passed
        on to the store.

        Args:
            type_: A feature type or iterable of types, matched against the metadata's
                ``type``/``method``/``primary_tag`` or ``method:source``.
            types: Alias for *type_*.
            seq_id: Sequence identifier to restrict the store search to.
            start: Region start.
            end: Region end.
            name: Exact display name.
            attributes: Mapping of attribute keys to a value or list of values;
                values may use ``*`` and ``?`` wildcards.

        Returns:
            A ``MergingIterator``.

        Raises:
            IndexSourceError: If the index has not been loaded yet and cannot be read.
        """
        table = self.load()
        type_ = type_ or types
        names = table.names
        if type_: names = filter_by_type(type_, names, table, self.feature_type)
        if attributes: names = filter_by_attribute(attributes, names, table)
        if name: names = filter_by_name(name, names, table)
        search_options = {'seq_id': seq_id, 'start': start, 'end': end}
        if self.stream_type: search_options['type_'] = self.stream_type
        return MergingIterator(self._store, names, table, search_options)

    def features(self, type_: Union[str, Iterable[str]] = None, *, iterator: bool = False,
                 **options) -> Union[MergingIterator, list[EditableFeature]]:
        """
        Queries features, as a list or as a lazy iterator.

        Args:
            type_: A feature type or iterable of types.
            iterator: If ``True``, return the ``MergingIterator`` instead of a list.
            **options: Further ``get_seq_stream`` options.

        Returns:
            A list of merged features in stream order, or the iterator.

        Examples:
            >>> meta.features('gene', seq_id='chr1')
            [Feature('GeneA', chr1:100..500, gene:refseq)]
        """
        stream = self.get_seq_stream(type_, **options)
        return stream if iterator else list(stream)

    def get_features_by_location(self, seq_id: str, start: int = None, end: int = None) -> list[EditableFeature]:
        return self.features(seq_id=seq_id, start=start, end=end)

    def get_features_by_name(self, name: str) -> list[EditableFeature]:
        return self.features(name=name)

    get_feature_by_name = get_features_by_name
    get_features_by_alias = get_features_by_name

    def get_features_by_attribute(self, attributes: Mapping[str, Union[str, Iterable[str]]]) -> list[EditableFeature]:
        return self.features(attributes=attributes)

    # Store operations that are forwarded unchanged
    def seq_ids(self) -> list[str]:
        """Returns the sequence identifiers known to the store."""
        return self._delegate('seq_ids')

    def segment(self, seq_id: str, start: int = None, end: int = None):
        """Returns the store's segment for a region."""
        return self._delegate('segment', seq_id, start, end)

    def _delegate(self, operation: str, *args):
        if (func := getattr(self._store, operation, None)) is None:
            raise MetaDBError(f'Store {self._store!r} does not support {operation}()')
        return func(*args)
