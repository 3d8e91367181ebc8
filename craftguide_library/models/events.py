"""Wire-level stream events for one assistant turn.

Order within a turn: ``text``* then ``metadata``? then ``recipe``? then
``done``. An ``error`` event, when present, is the last event and replaces
``done``.
"""

from typing import Annotated
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import Field
from pydantic import TypeAdapter

from .recipe import CraftingRecipe


class TextEvent(BaseModel):
    type: Literal["text"] = "text"
    content: str


class MetadataEvent(BaseModel):
    """Grounding citations, emitted at most once near the end of a turn."""

    type: Literal["metadata"] = "metadata"
    content: dict[str, Any]


class RecipeEvent(BaseModel):
    type: Literal["recipe"] = "recipe"
    content: CraftingRecipe


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str


class DoneEvent(BaseModel):
    type: Literal["done"] = "done"


StreamEvent = Annotated[
    TextEvent | MetadataEvent | RecipeEvent | ErrorEvent | DoneEvent,
    Field(discriminator="type"),
]

_stream_event_adapter: TypeAdapter[StreamEvent] = TypeAdapter(StreamEvent)

TERMINAL_EVENT_TYPES = frozenset({"done", "error"})


def parse_stream_event(data: Any) -> StreamEvent:
    """Validate a decoded record (dict or JSON string) as a StreamEvent.

    Raises:
        pydantic.ValidationError: If the record does not match any variant
    """
    if isinstance(data, str | bytes):
        return _stream_event_adapter.validate_json(data)
    return _stream_event_adapter.validate_python(data)


def serialize_stream_event(event: StreamEvent) -> str:
    """Serialize an event to the JSON carried in an SSE ``data:`` line."""
    return event.model_dump_json(by_alias=True)
