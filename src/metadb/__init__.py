"""
Overlay of sectioned-index metadata on the features of an external feature store.

Examples:
    >>> from metadb import MetaDB, MemoryStore, Feature
    >>> store = MemoryStore([Feature('geneA', 'chr1', 100, 500)])
    >>> meta = MetaDB(store, ['[geneA]', 'display_name = GeneA', 'type = gene:refseq'])
    >>> meta.features('gene')
    [Feature('GeneA', chr1:100..500, gene:refseq)]
"""
from metadb.containers import AttributeRecord, AttributeTable, AttributeTableError, Feature, MemoryStore
from metadb.io import IndexReader, IndexSourceError, open_index, parse
from metadb.query import GlobError, MergingIterator, IteratorState, compile_glob
from metadb.db import MetaDB, MetaDBError, MetaDBWarning

__version__ = '0.1.0'
