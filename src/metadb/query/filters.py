"""
Narrowing predicates applied to the candidate feature names of a query.

Each filter takes its criteria, a numpy ``object`` array of candidate names and
the ``AttributeTable``, and returns the surviving names in their original order.
None of them consults the feature store.
"""
from typing import Iterable, Mapping, Union

import numpy as np

from metadb.containers.attributes import AttributeTable
from metadb.query.glob import compile_glob
from metadb.utils import as_list


# Functions ------------------------------------------------------------------------------------------------------------
def filter_by_type(types: Union[str, Iterable[str]], candidates: np.ndarray, table: AttributeTable,
                   default_type: str = None) -> np.ndarray:
    """
    Keeps candidates whose base or extended type is one of *types* (case-insensitive).

    The base type is the first of ``type``, ``method``, ``primary_tag`` or
    *default_type*; the extended type is ``method:source``. A ``type`` written as
    ``method:source`` also matches on its method part.

    Args:
        types: A type string or an iterable of type strings.
        candidates: Candidate feature names.
        table: The attribute table.
        default_type: The type assumed for features without type information.

    Returns:
        The surviving candidate names.

    Examples:
        >>> filter_by_type('mRNA:refseq', table.names, table)
        array(['tx1'], dtype=object)
    """
    wanted = np.array(sorted({t.lower() for t in as_list(types)}), dtype=object)
    n = len(candidates)
    base = np.empty(n, dtype=object)
    extended = np.empty(n, dtype=object)
    method = np.empty(n, dtype=object)
    for i, name in enumerate(candidates):
        if (record := table.get(name)) is not None:
            base[i] = record.type_base(default_type)
            extended[i] = record.type_extended
            method[i] = record.type_method
    mask = np.isin(base, wanted) | np.isin(extended, wanted) | np.isin(method, wanted)
    return candidates[mask]


def filter_by_name(name: str, candidates: np.ndarray, table: AttributeTable) -> np.ndarray:
    """Keeps candidates whose display name (or ``name``) equals *name* exactly."""
    mask = np.fromiter(
        ((record := table.get(c)) is not None and record.display_name == name for c in candidates),
        dtype=bool, count=len(candidates)
    )
    return candidates[mask]


def filter_by_attribute(attributes: Mapping[str, Union[str, Iterable[str]]], candidates: np.ndarray,
                        table: AttributeTable) -> np.ndarray:
    """
    Keeps candidates matching every attribute criterion.

    For each key at least one of its values must match the stored value, either
    as a wildcard pattern or by case-insensitive equality. Candidates lacking the
    key, or storing an empty value for it, are dropped.

    Args:
        attributes: Mapping of attribute key to a value or an iterable of values.
        candidates: Candidate feature names.
        table: The attribute table.

    Returns:
        The surviving candidate names.

    Examples:
        >>> filter_by_attribute({'color': 'red', 'priority': ['1', '2']}, table.names, table)
        array(['geneA'], dtype=object)
    """
    mask = np.ones(len(candidates), dtype=bool)
    for key, values in attributes.items():
        tests = [_value_test(v) for v in as_list(values)]
        key = key.lower()
        for i, name in enumerate(candidates):
            if not mask[i]: continue
            record = table.get(name)
            stored = record.get(key) if record is not None else None
            mask[i] = bool(stored) and any(test(stored) for test in tests)
    return candidates[mask]


def _value_test(value: str):
    if (matcher := compile_glob(value)) is not None: return matcher
    value = value.lower()
    return lambda stored: stored.lower() == value
