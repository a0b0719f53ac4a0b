"""
Operation models for declarative page scripts.

This module defines the closed set of operations an interpreter can replay:
- Navigate: load a URL
- Click: click a registered element
- Fill: type text into a registered element

Operations are tagged by ``method`` so plain dicts (for example loaded from
JSON) validate into the right variant.
"""

from typing import Annotated, Any, Iterable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..errors import ConfigurationError


class Navigate(BaseModel):
    """Navigate the tab to ``url`` and wait for the load event."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: Literal["go"] = "go"
    url: str = Field(min_length=1)


class Click(BaseModel):
    """Click the element registered as ``target``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: Literal["click"] = "click"
    target: str = Field(min_length=1)


class Fill(BaseModel):
    """Type ``content`` into the element registered as ``target``.

    A Fill without content is a deliberate no-op: the step is skipped
    without resolving the target.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    method: Literal["fill"] = "fill"
    target: str = Field(min_length=1)
    content: Optional[str] = None


Operation = Annotated[Union[Navigate, Click, Fill], Field(discriminator="method")]

_OPERATIONS_ADAPTER = TypeAdapter(list[Operation])

_METHOD_ALIASES = {
    "go": "go",
    "navigate": "go",
    "click": "click",
    "fill": "fill",
}


def _normalize(raw: Any) -> Any:
    """Map method aliases and the generic ``target`` field onto each variant."""
    if isinstance(raw, BaseModel) or not isinstance(raw, dict):
        return raw

    data = dict(raw)
    method = str(data.get("method", "")).lower()
    data["method"] = _METHOD_ALIASES.get(method, method)

    if data["method"] == "go" and "url" not in data and "target" in data:
        data["url"] = data.pop("target")
    if data["method"] != "fill" and data.get("content") is None:
        data.pop("content", None)
    return data


def parse_operations(raw_operations: Iterable[Any]) -> list[Union[Navigate, Click, Fill]]:
    """
    Validate a sequence of operations.

    Accepts operation models or dicts such as
    ``{"method": "go", "target": "https://example.com"}``.

    Raises:
        ConfigurationError: If any entry is not a valid operation
    """
    try:
        return _OPERATIONS_ADAPTER.validate_python([_normalize(op) for op in raw_operations])
    except ValidationError as e:
        raise ConfigurationError(f"Invalid operation sequence: {e}") from e


def describe_operation(operation: Union[Navigate, Click, Fill]) -> dict[str, Any]:
    """Operation fields for display, without the method tag."""
    return operation.model_dump(exclude={"method"})
