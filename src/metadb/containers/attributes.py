"""Containers for per-feature metadata loaded from a sectioned index."""
from typing import Iterable, Iterator, Mapping, Optional, Union

import numpy as np


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class AttributeTableError(Exception):
    """Raised when a frozen AttributeTable is modified."""


# Classes --------------------------------------------------------------------------------------------------------------
class AttributeRecord(Mapping):
    """
    A read-only mapping of lower-cased attribute keys to string values for one feature.

    Some keys carry special meaning: ``display_name`` (or ``name``), ``type``,
    ``method``, ``source`` and ``primary_tag``. Everything else is a free-form
    attribute.

    Args:
        items: A mapping or iterable of ``(key, value)`` pairs. Keys are lower-cased.

    Examples:
        >>> rec = AttributeRecord({'Display_Name': 'GeneA', 'type': 'gene:refseq'})
        >>> rec['display_name']
        'GeneA'
        >>> rec.split_type()
        ('gene', 'refseq')
    """
    __slots__ = ('_data',)

    def __init__(self, items: Union[Mapping[str, str], Iterable[tuple[str, str]]] = None):
        if isinstance(items, Mapping): items = items.items()
        self._data: dict[str, str] = {k.lower(): v for k, v in items} if items else {}

    def __getitem__(self, key: str) -> str: return self._data[key]
    def __iter__(self) -> Iterator[str]: return iter(self._data)
    def __len__(self) -> int: return len(self._data)
    def __contains__(self, key) -> bool: return key in self._data
    def __repr__(self): return f"AttributeRecord({self._data!r})"
    def __eq__(self, other):
        if isinstance(other, AttributeRecord): return self._data == other._data
        if isinstance(other, Mapping): return self._data == dict(other)
        return False

    def merge(self, other: Mapping[str, str]) -> 'AttributeRecord':
        """Returns the union of this record and *other*, with *other* winning on shared keys.

        Args:
            other: The later record.

        Returns:
            A new ``AttributeRecord``.

        Examples:
            >>> AttributeRecord({'a': '1', 'b': '2'}).merge({'b': '3', 'c': '4'})
            AttributeRecord({'a': '1', 'b': '3', 'c': '4'})
        """
        merged = dict(self._data)
        merged.update((k.lower(), v) for k, v in other.items())
        return AttributeRecord(merged)

    def to_dict(self) -> dict[str, str]:
        """Returns a plain (mutable) copy of the record."""
        return dict(self._data)

    @property
    def display_name(self) -> Optional[str]:
        """Returns ``display_name``, falling back to ``name``.

        Returns:
            The display name, or ``None`` if neither key holds a value.
        """
        return self._data.get('display_name') or self._data.get('name') or None

    @property
    def type(self) -> Optional[str]: return self._data.get('type')
    @property
    def method(self) -> Optional[str]: return self._data.get('method')
    @property
    def source(self) -> Optional[str]: return self._data.get('source')
    @property
    def primary_tag(self) -> Optional[str]: return self._data.get('primary_tag')

    def type_base(self, default: str = None) -> Optional[str]:
        """Returns the lower-cased base type of the feature.

        The first non-empty of ``type``, ``method`` and ``primary_tag`` is used,
        otherwise *default*.

        Args:
            default: The fallback feature type.

        Returns:
            The lower-cased type, or ``None`` if nothing is available.

        Examples:
            >>> AttributeRecord({'method': 'mRNA'}).type_base('summary')
            'mrna'
            >>> AttributeRecord().type_base('summary')
            'summary'
        """
        base = self.type or self.method or self.primary_tag or default
        return base.lower() if base else None

    @property
    def type_extended(self) -> Optional[str]:
        """Returns the lower-cased ``method:source`` type, or ``None`` if there is no method.

        Examples:
            >>> AttributeRecord({'method': 'mRNA', 'source': 'RefSeq'}).type_extended
            'mrna:refseq'
        """
        if not self.method: return None
        return f"{self.method}:{self.source or ''}".lower()

    @property
    def type_method(self) -> Optional[str]:
        """Returns the lower-cased method part of a ``method:source`` type value.

        This is the primary tag a merged feature ends up with, so querying by it
        finds the feature. ``None`` if ``type`` has no ``:``.

        Examples:
            >>> AttributeRecord({'type': 'gene:refseq'}).type_method
            'gene'
        """
        if not self.type or ':' not in self.type: return None
        return self.split_type()[0].lower() or None

    def split_type(self) -> tuple[str, str]:
        """Splits the ``type`` value into ``(method, source)`` on ``:``.

        Missing parts are returned as empty strings.

        Examples:
            >>> AttributeRecord({'type': 'gene:refseq'}).split_type()
            ('gene', 'refseq')
            >>> AttributeRecord({'type': 'gene'}).split_type()
            ('gene', '')
        """
        parts = (self.type or '').split(':')
        return parts[0], parts[1] if len(parts) > 1 else ''


class AttributeTable(Mapping):
    """
    An ordered mapping of feature names to their ``AttributeRecord``.

    Records for a name that is merged more than once are combined with a union
    merge where the later record wins. Once frozen the table is read-only and
    may be shared between threads.

    Args:
        records: Optional iterable of ``(name, attributes)`` pairs, merged in order.

    Examples:
        >>> table = AttributeTable([('geneA', {'a': '1', 'b': '2'}), ('geneA', {'b': '3'})])
        >>> table['geneA'].to_dict()
        {'a': '1', 'b': '3'}
    """
    __slots__ = ('_records', '_frozen', '_names')

    def __init__(self, records: Iterable[tuple[str, Mapping[str, str]]] = None):
        self._records: dict[str, AttributeRecord] = {}
        self._frozen = False
        self._names = None
        if records:
            for name, attributes in records: self.merge(name, attributes)

    @classmethod
    def build(cls, records: Iterable[tuple[str, Mapping[str, str]]]) -> 'AttributeTable':
        """Builds and freezes a table from ``(name, attributes)`` pairs.

        Args:
            records: Pairs in parse order.

        Returns:
            A frozen ``AttributeTable``.
        """
        table = cls(records)
        table.freeze()
        return table

    def __getitem__(self, name: str) -> AttributeRecord: return self._records[name]
    def __iter__(self) -> Iterator[str]: return iter(self._records)
    def __len__(self) -> int: return len(self._records)
    def __contains__(self, name) -> bool: return name in self._records
    def __repr__(self): return f"<AttributeTable: {len(self)} features>"

    @property
    def frozen(self) -> bool: return self._frozen

    def freeze(self) -> 'AttributeTable':
        """Marks the table read-only.

        Returns:
            The table itself.
        """
        self._frozen = True
        return self

    def merge(self, name: str, attributes: Mapping[str, str]):
        """Merges *attributes* into the record for *name*.

        Keys of *attributes* override existing keys; all other existing keys are kept.

        Args:
            name: The feature name (case-sensitive).
            attributes: The new attributes.

        Raises:
            AttributeTableError: If the table is frozen.
        """
        if self._frozen: raise AttributeTableError(f'Cannot merge "{name}" into a frozen table')
        if (old := self._records.get(name)) is not None:
            self._records[name] = old.merge(attributes)
        else:
            self._records[name] = attributes if isinstance(attributes, AttributeRecord) else AttributeRecord(attributes)
        self._names = None

    @property
    def names(self) -> np.ndarray:
        """Returns the feature names in insertion order.

        This is the initial candidate set of a query.

        Returns:
            A numpy ``object`` array of names.
        """
        if self._names is None:
            names = np.empty(len(self._records), dtype=object)
            names[:] = list(self._records)
            self._names = names
        return self._names.copy()
