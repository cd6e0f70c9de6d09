"""
Containers for index metadata and for the features it is overlaid on.
"""
from metadb.containers.attributes import AttributeTableError, AttributeRecord, AttributeTable
from metadb.containers.feature import Feature
from metadb.containers.store import MemoryStore
