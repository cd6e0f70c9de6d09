"""Mutable feature records with located coordinates, as yielded by a feature store."""
from typing import Iterable, Iterator, Mapping, Optional


# Classes --------------------------------------------------------------------------------------------------------------
class Feature:
    """
    A named, located feature whose descriptive fields may be overwritten.

    A Feature can also act as a store-side handle: ``get_seq_stream`` yields fresh
    copies of its segments (or of itself) that fall in the requested region.

    Args:
        display_name: The feature name.
        seq_id: Identifier of the sequence the feature lies on.
        start: Start coordinate (inclusive).
        end: End coordinate (inclusive).
        strand: ``1``, ``-1`` or ``0``.
        primary_tag: The feature type.
        source_tag: The feature source.
        attributes: Optional free-form attributes.
        segments: Optional sub-features streamed in place of the feature itself.

    Examples:
        >>> feat = Feature('geneA', 'chr1', 100, 500)
        >>> feat.overlaps('chr1', 450, 900)
        True
        >>> [f.start for f in feat.get_seq_stream(seq_id='chr1')]
        [100]
    """
    __slots__ = ('display_name', 'seq_id', 'start', 'end', 'strand', 'primary_tag', 'source_tag', 'attributes',
                 'segments')

    def __init__(self, display_name: str = None, seq_id: str = None, start: int = None, end: int = None,
                 strand: int = 0, primary_tag: str = None, source_tag: str = None,
                 attributes: Mapping[str, str] = None, segments: Iterable['Feature'] = None):
        self.display_name: Optional[str] = display_name
        self.seq_id: Optional[str] = seq_id
        self.start: Optional[int] = start
        self.end: Optional[int] = end
        self.strand: int = strand
        self.primary_tag: Optional[str] = primary_tag
        self.source_tag: Optional[str] = source_tag
        self.attributes: dict[str, str] = dict(attributes) if attributes else {}
        self.segments: list[Feature] = list(segments) if segments else []

    def __repr__(self):
        return f"Feature({self.display_name!r}, {self.seq_id}:{self.start}..{self.end}, {self.type})"
    def __len__(self) -> int: return 0 if self.start is None or self.end is None else self.end - self.start + 1
    def __getitem__(self, key: str) -> Optional[str]: return self.attributes.get(key)
    def __eq__(self, other):
        if isinstance(other, Feature):
            return (self.display_name == other.display_name and self.location == other.location and
                    self.type == other.type and self.attributes == other.attributes)
        return False

    @property
    def location(self) -> tuple:
        """Returns ``(seq_id, start, end, strand)``."""
        return self.seq_id, self.start, self.end, self.strand

    @property
    def type(self) -> Optional[str]:
        """Returns the ``primary_tag:source_tag`` type, or just the primary tag if there is no source.

        Examples:
            >>> Feature('x', primary_tag='gene', source_tag='refseq').type
            'gene:refseq'
        """
        if not self.primary_tag: return None
        return f"{self.primary_tag}:{self.source_tag}" if self.source_tag else self.primary_tag

    def overlaps(self, seq_id: str = None, start: int = None, end: int = None) -> bool:
        """Tests whether the feature lies in a region.

        Unset bounds are unconstrained.

        Args:
            seq_id: The sequence identifier.
            start: Region start (inclusive).
            end: Region end (inclusive).

        Returns:
            ``True`` if the feature overlaps the region.
        """
        if seq_id is not None and self.seq_id != seq_id: return False
        if start is not None and self.end is not None and self.end < start: return False
        if end is not None and self.start is not None and self.start > end: return False
        return True

    def get_seq_stream(self, seq_id: str = None, start: int = None, end: int = None,
                       type_: str = None) -> Iterator['Feature']:
        """Yields copies of the segments (or of this feature) in the region.

        Segments carrying a primary tag that differs from *type_* are skipped;
        untyped segments always pass.

        Args:
            seq_id: The sequence identifier.
            start: Region start (inclusive).
            end: Region end (inclusive).
            type_: Requested feature type.

        Yields:
            Fresh ``Feature`` copies, safe to modify.
        """
        for part in self.segments or (self,):
            if not part.overlaps(seq_id, start, end): continue
            if type_ and part.primary_tag and part.primary_tag.lower() != type_.lower(): continue
            yield part.copy()

    def copy(self) -> 'Feature':
        """Creates a copy of the feature (attributes and segment list are copied).

        Returns:
            A new ``Feature``.
        """
        return Feature(self.display_name, self.seq_id, self.start, self.end, self.strand, self.primary_tag,
                       self.source_tag, self.attributes, self.segments)
