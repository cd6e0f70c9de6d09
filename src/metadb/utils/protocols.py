from typing import Protocol, Iterable, Optional, Mapping, runtime_checkable


@runtime_checkable
class EditableFeature(Protocol):
    """Protocol for feature records whose descriptive fields can be overwritten (e.g. Feature)."""
    display_name: Optional[str]
    primary_tag: Optional[str]
    source_tag: Optional[str]
    attributes: Mapping[str, str]


@runtime_checkable
class StoreRecord(Protocol):
    """Protocol for a store-side handle that opens a stream of features scoped to itself."""

    def get_seq_stream(self, seq_id: str = None, start: int = None, end: int = None,
                       type_: str = None) -> Iterable[EditableFeature]: ...


@runtime_checkable
class FeatureStore(Protocol):
    """Protocol for the external feature store consulted by MetaDB (e.g. MemoryStore)."""

    def get_features_by_name(self, name: str) -> Iterable[StoreRecord]: ...
