"""An in-memory feature store honouring the store protocol consumed by MetaDB."""
from typing import Iterable, Iterator

from metadb.containers.feature import Feature


# Classes --------------------------------------------------------------------------------------------------------------
class MemoryStore:
    """
    Holds features in memory and answers name and region queries.

    Features are looked up by their ``display_name``; each returned feature opens
    its own stream through ``Feature.get_seq_stream``.

    Args:
        features: Optional iterable of ``Feature`` objects.
        feature_type: The type reported to overlays as the default feature type.

    Examples:
        >>> store = MemoryStore([Feature('geneA', 'chr1', 1, 100)])
        >>> store.get_features_by_name('geneA')
        [Feature('geneA', chr1:1..100, None)]
    """
    __slots__ = ('_features', 'feature_type')

    def __init__(self, features: Iterable[Feature] = None, feature_type: str = None):
        self._features: list[Feature] = list(features) if features else []
        self.feature_type = feature_type

    def __len__(self) -> int: return len(self._features)
    def __iter__(self) -> Iterator[Feature]: return iter(self._features)
    def __repr__(self): return f"<MemoryStore: {len(self)} features>"

    def add(self, *features: Feature):
        """Adds features to the store."""
        self._features.extend(features)

    def get_features_by_name(self, name: str) -> list[Feature]:
        """Returns every stored feature whose display name is *name*."""
        return [f for f in self._features if f.display_name == name]

    def get_seq_stream(self, seq_id: str = None, start: int = None, end: int = None,
                       type_: str = None) -> Iterator[Feature]:
        """Yields copies of every stored feature in the region."""
        for feature in self._features: yield from feature.get_seq_stream(seq_id, start, end, type_)

    def seq_ids(self) -> list[str]:
        """Returns the distinct sequence identifiers in insertion order."""
        return list(dict.fromkeys(f.seq_id for f in self._features if f.seq_id is not None))

    def segment(self, seq_id: str, start: int = None, end: int = None) -> list[Feature]:
        """Returns the stored features (not copies) overlapping a region."""
        return [f for f in self._features if f.overlaps(seq_id, start, end)]
