"""Prompt text for the assistant, the router and the side calls."""

import json
from typing import Any

EDITIONS = ("java", "bedrock")
DEFAULT_EDITION = "java"

_EDITION_NOTES = {
    "java": (
        "The player is on Minecraft: Java Edition. Give Java Edition mechanics, recipes, "
        "commands and redstone behaviour, and call out where Bedrock Edition differs only "
        "when it matters."
    ),
    "bedrock": (
        "The player is on Minecraft: Bedrock Edition (consoles, mobile, Windows). Give "
        "Bedrock Edition mechanics, recipes, commands and redstone behaviour, and call out "
        "where Java Edition differs only when it matters."
    ),
}

_BASE_INSTRUCTION = """You are a helpful and knowledgeable Minecraft expert.
Your goal is to assist players with crafting recipes, game mechanics, updates, building strategies, and redstone tutorials.
Always ensure your answers are accurate and relevant to Minecraft.
If a user asks about a topic unrelated to Minecraft (like furniture styles, general history, or other games), politely steer the conversation back to Minecraft or explain that you specialize only in Minecraft.
Use Markdown to format your responses effectively, using bold text for key terms and lists for steps or items.

EDITION:
{edition_note}

SEARCH GROUNDING:
You can search the web. Search when the question concerns recent updates, snapshots, version-specific changes or exact numbers you are unsure of, and prefer the official Minecraft Wiki and minecraft.net as sources.
Do not search for stable, well-known basics. Never invent version numbers or release dates.

CRAFTING RECIPES:
When the player asks how to craft an item, explain the ingredients and layout in text. A visual crafting grid is attached separately, so do not draw ASCII grids."""

ROUTER_INSTRUCTION = (
    "You classify requests for a Minecraft assistant. Answer with exactly one word: YES or NO."
)

ROUTER_PROMPT = """Does the following message ask how to craft a specific item at a crafting table (a recipe with a 3x3 or 2x2 grid layout)?

MESSAGE:
{message}

Answer YES or NO."""

RECIPE_INSTRUCTION_SUFFIX = """

Call display_crafting_recipe exactly once for the item the player asked about.
List the nine crafting-table slots row by row from the top-left, using "air" for empty slots.
Use the in-game item names (for example "Iron Ingot", "Stick", "Oak Planks")."""

TITLE_INSTRUCTION = (
    "You are a specialized assistant that generates short, concise (2-5 words) titles for chat "
    "sessions based on their content. Return ONLY the title text, no quotes or prefixes."
)

SUMMARY_CONTEXT_HEADER = "[SYSTEM: Session Context Loaded]"
SUMMARY_CONTEXT_ACK = "I have loaded the session context."

SUMMARY_JSON_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "summaryVersion": {"type": "string", "const": "1.0"},
        "lastUpdated": {"type": "string", "description": "ISO8601 timestamp"},
        "currentProjects": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "type": {"type": "string"},
                    "status": {"type": "string", "enum": ["planning", "in-progress", "completed"]},
                    "description": {"type": "string"},
                    "progress": {"type": "number", "minimum": 0, "maximum": 100},
                    "nextSteps": {"type": "array", "items": {"type": "string"}},
                    "blockers": {"type": "array", "items": {"type": "string"}},
                },
                "required": ["name", "type", "status", "description", "progress", "nextSteps"],
            },
        },
        "knowledgeBase": {
            "type": "object",
            "properties": {
                "mechanicsLearned": {"type": "array", "items": {"type": "string"}},
                "recipesKnown": {"type": "array", "items": {"type": "string"}},
                "strategiesDiscovered": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["mechanicsLearned", "recipesKnown", "strategiesDiscovered"],
        },
        "goals": {
            "type": "object",
            "properties": {
                "shortTerm": {"type": "array", "items": {"type": "string"}},
                "longTerm": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["shortTerm", "longTerm"],
        },
        "resources": {
            "type": "object",
            "properties": {
                "currentInventory": {"type": "object", "additionalProperties": {"type": "number"}},
                "needed": {"type": "object", "additionalProperties": {"type": "number"}},
                "farmingLocations": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["currentInventory", "needed", "farmingLocations"],
        },
    },
    "required": ["summaryVersion", "lastUpdated", "currentProjects", "knowledgeBase", "goals"],
}

_SUMMARY_PROMPT = """You are analyzing a Minecraft help session. Extract structured information from the conversation below.

CONVERSATION:
{conversation}

INSTRUCTIONS:
For currentProjects: Extract any building/farming/crafting projects mentioned. For each project provide:
  - name: The project name
  - type: Category (e.g., "farm", "build", "redstone", "exploration")
  - status: "planning", "in-progress", or "completed"
  - description: What the project is about
  - progress: Estimate 0-100
  - nextSteps: What needs to be done next
  - blockers: Any mentioned obstacles (optional)

For knowledgeBase:
  - mechanicsLearned: Game mechanics discussed (e.g., "villager panic mechanics", "mob spawning")
  - recipesKnown: Items/recipes mentioned
  - strategiesDiscovered: Tips or strategies shared

For goals:
  - shortTerm: Immediate next steps or tasks (things to do soon)
  - longTerm: Bigger objectives or end goals

For resources:
  - currentInventory: Items the user has (as key-value pairs, e.g., {{"iron": 10}})
  - needed: Items needed for projects (as key-value pairs)
  - farmingLocations: Where to find resources

Provide detailed information. Extract as much as you can from the conversation."""


def normalize_edition(edition: str | None) -> str:
    """Return a supported edition name, falling back to Java."""
    if edition and edition.lower() in EDITIONS:
        return edition.lower()
    return DEFAULT_EDITION


def get_system_instruction(edition: str | None = DEFAULT_EDITION) -> str:
    """Build the conversational system instruction for an edition."""
    return _BASE_INSTRUCTION.format(edition_note=_EDITION_NOTES[normalize_edition(edition)])


def get_recipe_instruction(edition: str | None = DEFAULT_EDITION) -> str:
    return get_system_instruction(edition) + RECIPE_INSTRUCTION_SUFFIX


def build_router_prompt(message: str) -> str:
    return ROUTER_PROMPT.format(message=message)


def build_summary_prompt(transcript: list[tuple[str, str]]) -> str:
    """Build the extraction prompt from (role, text) pairs."""
    conversation = "\n\n".join(f"{role}: {text}" for role, text in transcript)
    return _SUMMARY_PROMPT.format(conversation=conversation)


def build_title_prompt(context: list[dict[str, Any]]) -> str:
    return f"Generate a title for this conversation:\n\n{json.dumps(context)}"


def build_summary_context(summary_json: str) -> str:
    """Text of the synthetic user turn that carries a prior summary."""
    return f"{SUMMARY_CONTEXT_HEADER}\n\n{summary_json}"
