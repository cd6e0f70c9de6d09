"""Lazy merging of feature-store streams with index metadata."""
from enum import Enum, auto
from typing import Iterable, Iterator, Mapping, Optional
import logging

from metadb.containers.attributes import AttributeRecord, AttributeTable
from metadb.utils.protocols import EditableFeature, FeatureStore, StoreRecord


# Constants ------------------------------------------------------------------------------------------------------------
logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------
class IteratorState(Enum):
    ADVANCING_NAME = auto()  # no inner stream open
    DRAINING_INNER = auto()  # pulling from the current name's stream
    EXHAUSTED = auto()


class MergingIterator:
    """
    Streams features from a store for each candidate name, overlaying index metadata on each.

    The iterator is a resumable state machine: ``step`` performs one transition,
    either opening the stream of the next candidate name or pulling one feature
    from the open stream. At most one store stream is open at a time. Once
    exhausted the iterator cannot be restarted.

    Args:
        store: The feature store.
        names: Candidate feature names, in the order they should be visited.
        table: The attribute table supplying the metadata.
        search_options: Keyword arguments passed to each ``StoreRecord.get_seq_stream``.

    Examples:
        >>> it = MergingIterator(store, ['geneA', 'geneB'], table, {'seq_id': 'chr1'})
        >>> for feature in it:
        ...     print(feature.display_name, feature.primary_tag)
    """
    __slots__ = ('_store', '_names', '_position', '_table', '_search_options', '_state', '_current_name', '_inner')

    def __init__(self, store: FeatureStore, names: Iterable[str], table: AttributeTable,
                 search_options: Mapping[str, object] = None):
        self._store = store
        self._names = list(names)
        self._position = 0
        self._table = table
        self._search_options = dict(search_options) if search_options else {}
        self._state = IteratorState.ADVANCING_NAME
        self._current_name: Optional[str] = None
        self._inner: Optional[Iterator[EditableFeature]] = None

    def __repr__(self):
        return f"<MergingIterator: {self._state.name}, {len(self._names) - self._position} names remaining>"

    @property
    def state(self) -> IteratorState: return self._state
    @property
    def current_name(self) -> Optional[str]: return self._current_name
    @property
    def remaining(self) -> list[str]: return self._names[self._position:]
    @property
    def exhausted(self) -> bool: return self._state is IteratorState.EXHAUSTED

    def step(self) -> Optional[EditableFeature]:
        """
        Performs a single state transition.

        In ``ADVANCING_NAME`` the next candidate name is taken and its store stream
        opened; names the store does not know are dropped. In ``DRAINING_INNER`` one
        feature is pulled, merged and returned; an exhausted stream returns the
        machine to ``ADVANCING_NAME``.

        Returns:
            A merged feature, or ``None`` if this step produced none.
        """
        if self._state is IteratorState.ADVANCING_NAME:
            if self._position >= len(self._names):
                self._state, self._current_name = IteratorState.EXHAUSTED, None
                return None
            name = self._names[self._position]
            self._position += 1
            if (record := self._lookup(name)) is None:
                logger.debug('No store record for "%s", skipping', name)
                return None
            self._current_name = name
            self._inner = iter(record.get_seq_stream(**self._search_options))
            self._state = IteratorState.DRAINING_INNER
            return None

        if self._state is IteratorState.DRAINING_INNER:
            feature = next(self._inner, None)
            if feature is None:
                self._inner, self._state = None, IteratorState.ADVANCING_NAME
                return None
            if (attributes := self._table.get(self._current_name)) is not None:
                overlay_attributes(feature, attributes)
            return feature

        return None

    def _lookup(self, name: str) -> Optional[StoreRecord]:
        # Only the first store record of a name is used
        return next(iter(self._store.get_features_by_name(name)), None)

    def __iter__(self): return self
    def __next__(self) -> EditableFeature:
        while self._state is not IteratorState.EXHAUSTED:
            if (feature := self.step()) is not None: return feature
        raise StopIteration

    def next_seq(self) -> Optional[EditableFeature]:
        """Returns the next merged feature, or ``None`` once the iterator is exhausted."""
        return next(self, None)


# Functions ------------------------------------------------------------------------------------------------------------
def overlay_attributes(feature: EditableFeature, attributes: AttributeRecord) -> EditableFeature:
    """
    Overwrites a feature's descriptive fields from its index metadata.

    The attribute collection is replaced wholesale. The primary tag and source tag
    come from splitting ``type`` into ``method:source``, falling back to the
    ``primary_tag`` and ``source`` keys. A display name in the metadata replaces
    the feature's own.

    Args:
        feature: The feature to modify in place.
        attributes: The feature's ``AttributeRecord``.

    Returns:
        The same feature.

    Examples:
        >>> feat = overlay_attributes(Feature('geneA'), AttributeRecord({'type': 'gene:refseq'}))
        >>> feat.primary_tag, feat.source_tag
        ('gene', 'refseq')
    """
    feature.attributes = attributes.to_dict()
    method, source = attributes.split_type()
    if method or attributes.primary_tag: feature.primary_tag = method or attributes.primary_tag
    if source or attributes.source: feature.source_tag = source or attributes.source
    if display_name := attributes.display_name: feature.display_name = display_name
    return feature
