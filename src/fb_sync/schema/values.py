"""Tagged cell values for moving rows between servers.

Rows are copied without a fixed schema, so every cell is classified into a
``ValueKind`` before it is bound.  Classification never converts the value;
it only makes binding explicit and rejects types the driver cannot bind.
"""

from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, NamedTuple, Sequence

from fb_sync.errors import TableSyncError


class ValueKind(str, Enum):
    """Kind of a cell value, decided by its Python type."""

    NULL = "null"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    TEXT = "text"
    DATETIME = "datetime"
    BINARY = "binary"


class TaggedValue(NamedTuple):
    """A cell value paired with its kind; ``value`` is never converted."""

    kind: ValueKind
    value: Any


# bool before int: bool is an int subclass
_KIND_BY_TYPE: list[tuple[tuple[type, ...], ValueKind]] = [
    ((bool,), ValueKind.BOOLEAN),
    ((int,), ValueKind.INTEGER),
    ((float,), ValueKind.FLOAT),
    ((Decimal,), ValueKind.DECIMAL),
    ((str,), ValueKind.TEXT),
    ((datetime, date, time), ValueKind.DATETIME),
    ((bytes, bytearray, memoryview), ValueKind.BINARY),
]


def tag_value(value: Any) -> TaggedValue:
    """Classify one cell.

    Raises:
        TableSyncError: If the value's type has no kind.

    Examples:
        >>> tag_value(None).kind
        <ValueKind.NULL: 'null'>
        >>> tag_value(Decimal("1.50"))
        TaggedValue(kind=<ValueKind.DECIMAL: 'decimal'>, value=Decimal('1.50'))
    """
    if value is None:
        return TaggedValue(ValueKind.NULL, None)
    for types, kind in _KIND_BY_TYPE:
        if isinstance(value, types):
            return TaggedValue(kind, value)
    # Large BLOBs arrive as file-like readers
    if callable(getattr(value, "read", None)):
        return tag_value(value.read())
    raise TableSyncError(f"Unsupported value type: {type(value).__name__}")


def tag_row(row: Sequence[Any]) -> list[TaggedValue]:
    """Classify every cell of a row, keeping positional order."""
    return [tag_value(cell) for cell in row]


def bind_params(param_names: Sequence[str], tagged: Sequence[TaggedValue]) -> dict[str, Any]:
    """Build the named-parameter dict for one INSERT.

    NULL cells bind as ``None`` (SQL NULL); every other kind binds its value
    unchanged.
    """
    if len(param_names) != len(tagged):
        raise TableSyncError(
            f"Row has {len(tagged)} values for {len(param_names)} columns"
        )
    params: dict[str, Any] = {}
    for name, cell in zip(param_names, tagged):
        params[name] = None if cell.kind is ValueKind.NULL else cell.value
    return params
