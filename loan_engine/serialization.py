"""JSON-ready export of engine results for whatever RPC/JSON boundary the host uses."""

from typing import Any

from pydantic import TypeAdapter


def to_jsonable(result: Any) -> Any:
    """Dump a result dataclass to plain JSON types (Decimal -> str, date -> ISO)."""
    return TypeAdapter(type(result)).dump_python(result, mode="json")
