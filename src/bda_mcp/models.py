"""Pydantic models and value types for query execution."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigurationError
from .types import QueryState, ValueKind


class DatabaseBinding(BaseModel):
    """Maps a logical database name to a physical database and a result location."""
    model_config = ConfigDict(frozen=True)

    logical_name: str = Field(min_length=1)
    database: str = Field(min_length=1)
    output_location: str
    source_location: Optional[str] = None

    @field_validator("output_location")
    @classmethod
    def validate_output_location(cls, v: str) -> str:
        if not v.startswith("s3://"):
            raise ValueError(f"output_location must be an s3:// URI, got '{v}'")
        return v


class DatabaseBindings(Mapping):
    """Read-only set of database bindings keyed by logical name."""

    def __init__(self, bindings: Iterable[DatabaseBinding] = ()):
        entries: Dict[str, DatabaseBinding] = {}
        for binding in bindings:
            if binding.logical_name in entries:
                raise ConfigurationError(f"Duplicate database binding: '{binding.logical_name}'")
            entries[binding.logical_name] = binding
        self._entries = MappingProxyType(entries)

    def __getitem__(self, logical_name: str) -> DatabaseBinding:
        return self._entries[logical_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"DatabaseBindings({list(self._entries)})"


class QueryHandle(BaseModel):
    """Opaque identifier of one submitted query execution."""
    model_config = ConfigDict(frozen=True)

    execution_id: str = Field(min_length=1)

    def __str__(self) -> str:
        return self.execution_id


class QueryStatus(BaseModel):
    """Observed status of a query execution."""
    model_config = ConfigDict(frozen=True)

    state: QueryState
    reason: Optional[str] = None


class ColumnDescriptor(BaseModel):
    """Name and declared type of one result column."""
    model_config = ConfigDict(frozen=True)

    name: str
    type: str


class ResultPage(BaseModel):
    """One page of raw result rows and the token of the next page, if any."""
    model_config = ConfigDict(frozen=True)

    columns: List[ColumnDescriptor] = Field(default_factory=list)
    rows: List[List[Optional[str]]] = Field(default_factory=list)
    next_token: Optional[str] = None


Scalar = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class TypedValue:
    """A decoded cell value tagged with its kind."""
    kind: ValueKind
    value: Scalar

    @classmethod
    def null(cls) -> "TypedValue":
        return _NULL

    @property
    def is_null(self) -> bool:
        return self.kind == ValueKind.NULL


_NULL = TypedValue(ValueKind.NULL, None)


class ResultRow(Mapping):
    """Read-only mapping of column name to TypedValue, in column order."""

    def __init__(self, values: Dict[str, TypedValue]):
        self._values = dict(values)

    def __getitem__(self, column: str) -> TypedValue:
        return self._values[column]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ResultRow):
            return list(self._values.items()) == list(other._values.items())
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._values.items()))

    def __repr__(self) -> str:
        return f"ResultRow({self.to_dict()!r})"

    def to_dict(self) -> Dict[str, Scalar]:
        """Return the row as plain Python values, None for nulls."""
        return {name: typed.value for name, typed in self._values.items()}
