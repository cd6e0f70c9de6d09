import pytest

from metadb import MemoryStore, Feature, parse

INDEX_TEXT = """\
# metadata for the test tracks
[geneA]
display_name = GeneA
type         = gene:refseq
color        = red
priority     = 1

[geneB]
display_name = GeneB
method       = mRNA
source       = refseq
color        = Red   # the same colour, differently cased
priority     = 3

[geneC]
name         = GeneC
primary_tag  = exon
color        = blue
priority     = 2
note         = #ff00aa

[orphan]
display_name = Orphan
type         = gene
"""


@pytest.fixture
def index_lines():
    return INDEX_TEXT.splitlines()


@pytest.fixture
def table(index_lines):
    return parse(index_lines)


@pytest.fixture
def store():
    return MemoryStore([
        Feature('geneA', 'chr1', 100, 500),
        Feature('geneB', 'chr1', 1000, 2000, segments=[
            Feature('geneB', 'chr1', 1000, 1200),
            Feature('geneB', 'chr1', 1800, 2000),
        ]),
        Feature('geneC', 'chr2', 50, 80, attributes={'stale': 'yes'}),
    ])
