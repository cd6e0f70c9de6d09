"""Shell-style wildcard patterns for attribute queries."""
from re import compile as regex, IGNORECASE, error as RegexError
from typing import Callable, Optional


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class GlobError(ValueError):
    """Raised when a wildcard pattern cannot be turned into a regular expression."""


# Constants ------------------------------------------------------------------------------------------------------------
_HAS_WILDCARD = regex(r'(?<!\\)[*?]')
_METACHARACTERS = regex(r'(?<!\\)([+\[\]^{}$|().])')
_STAR = regex(r'(?<!\\)\*')
_QUESTION = regex(r'(?<!\\)\?')


# Functions ------------------------------------------------------------------------------------------------------------
def glob_to_regex(pattern: str) -> Optional[str]:
    """
    Translates a wildcard pattern into regular expression source.

    ``*`` matches any run of characters and ``?`` any single character. Both can
    be escaped with a backslash. Other regex metacharacters are escaped.

    Args:
        pattern: The wildcard pattern.

    Returns:
        The regex source, or ``None`` if *pattern* holds no unescaped wildcard.

    Examples:
        >>> glob_to_regex('foo*')
        'foo.*'
        >>> glob_to_regex('a.b?')
        'a\\\\.b.'
        >>> glob_to_regex('plain') is None
        True
    """
    if not _HAS_WILDCARD.search(pattern): return None
    pattern = _METACHARACTERS.sub(r'\\\1', pattern)
    pattern = _STAR.sub('.*', pattern)
    return _QUESTION.sub('.', pattern)


def compile_glob(pattern: str) -> Optional[Callable[[str], bool]]:
    """
    Compiles a wildcard pattern into a case-insensitive, unanchored predicate.

    The match is a search, not a full match, so ``foo*`` matches ``'xxfoobar'``.

    Args:
        pattern: The wildcard pattern.

    Returns:
        A predicate taking a string, or ``None`` if *pattern* holds no wildcard.

    Raises:
        GlobError: If the translated pattern is not a valid regular expression.

    Examples:
        >>> match = compile_glob('f?o')
        >>> match('FOO'), match('fa')
        (True, False)
    """
    if (source := glob_to_regex(pattern)) is None: return None
    try: search = regex(source, IGNORECASE).search
    except RegexError as e: raise GlobError(f'Invalid wildcard pattern "{pattern}": {e}') from e
    return lambda value: search(value) is not None
