"""
Candidate filtering and result merging for metadata-overlay queries.
"""
from metadb.query.glob import GlobError, compile_glob, glob_to_regex
from metadb.query.filters import filter_by_type, filter_by_name, filter_by_attribute
from metadb.query.iterator import IteratorState, MergingIterator, overlay_attributes
