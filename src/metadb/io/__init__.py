"""
Reading metadata indexes from local files, remote URLs, handles and in-memory lines.
"""
from metadb.io.open import IndexSourceError, Xopen, RemoteSource, open_index
from metadb.io.index import IndexReader, parse
