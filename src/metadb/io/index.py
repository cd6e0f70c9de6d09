"""Reader for sectioned ``[name]`` / ``key = value`` metadata indexes."""
from typing import Iterable, Iterator, Optional
from re import compile as regex, IGNORECASE
import logging

from metadb.containers.attributes import AttributeRecord, AttributeTable


# Constants ------------------------------------------------------------------------------------------------------------
logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------
class IndexReader:
    """
    Parses a sectioned metadata index into ``(feature_name, AttributeRecord)`` pairs.

    One pair is yielded per section occurrence, in file order. Sections without
    any key/value line are not yielded. Malformed lines are skipped.

    Examples:
        >>> reader = IndexReader(['[geneA]', 'display_name = GeneA', 'type = gene:refseq'])
        >>> list(reader)
        [('geneA', AttributeRecord({'display_name': 'GeneA', 'type': 'gene:refseq'}))]
    """
    _SECTION_REGEX = regex(r'^\[([^\]]+)\]')
    _PAIR_REGEX = regex(r'^([A-Za-z0-9_: -]+?)\s*=\s*(.*)')
    _COMMENT_REGEX = regex(r'\s*#.*$')
    # A '#' that looks like part of a value rather than the start of a comment
    _KEEP_HASH_REGEXES = (
        regex(r'#[0-9a-f]{6,8}\s*$', IGNORECASE),  # colours
        regex(r'\w+#\w+'),
        regex(r'\w+"*\s*#\d+$'),
    )
    __slots__ = ('_lines',)

    def __init__(self, lines: Iterable[str]):
        self._lines = lines

    @classmethod
    def strip_comment(cls, line: str) -> str:
        """
        Removes a right-hand ``#`` comment unless the ``#`` looks like part of a value.

        Args:
            line: A line with trailing whitespace already removed.

        Returns:
            The line without its comment.

        Examples:
            >>> IndexReader.strip_comment('key = value #not-a-color')
            'key = value'
            >>> IndexReader.strip_comment('key = #ff00aa')
            'key = #ff00aa'
        """
        if any(r.search(line) for r in cls._KEEP_HASH_REGEXES): return line
        return cls._COMMENT_REGEX.sub('', line, count=1)

    def __iter__(self) -> Iterator[tuple[str, AttributeRecord]]:
        section: Optional[str] = None
        attributes: dict[str, str] = {}
        for line in self._lines:
            line = self.strip_comment(line.rstrip())
            if m := self._SECTION_REGEX.match(line):
                if section is not None and attributes: yield section, AttributeRecord(attributes)
                section, attributes = m.group(1), {}
            elif section is not None and (m := self._PAIR_REGEX.match(line)):
                attributes[m.group(1).lower()] = m.group(2)
        if section is not None and attributes: yield section, AttributeRecord(attributes)


# Functions ------------------------------------------------------------------------------------------------------------
def parse(lines: Iterable[str]) -> AttributeTable:
    """
    Parses index lines into a frozen ``AttributeTable``.

    Sections that repeat a feature name are union-merged, the later section
    winning on shared keys.

    Args:
        lines: The lines of the index.

    Returns:
        A frozen ``AttributeTable``.

    Examples:
        >>> table = parse(['[x]', 'a = 1', 'b = 2', '[x]', 'b = 3', 'c = 4'])
        >>> table['x'].to_dict()
        {'a': '1', 'b': '3', 'c': '4'}
    """
    table = AttributeTable.build(IndexReader(lines))
    logger.debug('Parsed metadata for %d features', len(table))
    return table
