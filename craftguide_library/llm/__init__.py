"""Model provider integration.

Public Interface:
    - ModelClient: Explicitly constructed handle for provider calls
    - ReplyChunk: Provider-neutral partial reply
    - get_system_instruction: Edition-specific system instruction
    - SEARCH_TOOL, CRAFTING_TOOL: Tool declarations
"""

from .client import ModelClient
from .client import ReplyChunk
from .client import model_content
from .client import user_content
from .prompts import get_system_instruction
from .prompts import normalize_edition
from .tools import CRAFTING_FUNCTION_NAME
from .tools import CRAFTING_TOOL
from .tools import SEARCH_TOOL

__all__ = [
    "CRAFTING_FUNCTION_NAME",
    "CRAFTING_TOOL",
    "ModelClient",
    "ReplyChunk",
    "SEARCH_TOOL",
    "get_system_instruction",
    "model_content",
    "normalize_edition",
    "user_content",
]
