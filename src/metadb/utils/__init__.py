"""
Small helpers shared across the package.
"""
from typing import Iterable, Union


# Functions ------------------------------------------------------------------------------------------------------------
def as_list(value: Union[str, int, float, Iterable, None]) -> list[str]:
    """
    Normalises a query criterion that may be a single value or a collection of values.

    Non-string values are converted with ``str``, so ``1`` and ``'1'`` are the same criterion.

    Args:
        value: A string, a number, an iterable of either, or ``None``.

    Returns:
        A list of strings (empty for ``None``).

    Examples:
        >>> as_list('gene')
        ['gene']
        >>> as_list(('gene', 'mRNA'))
        ['gene', 'mRNA']
        >>> as_list([1, 2])
        ['1', '2']
    """
    if value is None: return []
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable): return [_as_str(value)]
    return [_as_str(v) for v in value]


def _as_str(value) -> str:
    if isinstance(value, str): return value
    if isinstance(value, bytes): return value.decode()
    return str(value)
