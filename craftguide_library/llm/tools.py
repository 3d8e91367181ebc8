"""Tool declarations passed to the model provider."""

from google.genai import types

CRAFTING_FUNCTION_NAME = "display_crafting_recipe"

SEARCH_TOOL = types.Tool(google_search=types.GoogleSearch())

CRAFTING_TOOL = types.Tool(
    function_declarations=[
        types.FunctionDeclaration(
            name=CRAFTING_FUNCTION_NAME,
            description=(
                "Display a visual 3x3 crafting-table grid for a Minecraft item. Use only when "
                "the user asks how to craft a specific item."
            ),
            parameters=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "slots": types.Schema(
                        type=types.Type.ARRAY,
                        description=(
                            "Exactly nine item names for the crafting grid, row by row from the "
                            'top-left. Use "air" for empty slots.'
                        ),
                        items=types.Schema(type=types.Type.STRING),
                        min_items=9,
                        max_items=9,
                    ),
                    "outputItem": types.Schema(
                        type=types.Type.STRING,
                        description="Name of the crafted item.",
                    ),
                    "outputAmount": types.Schema(
                        type=types.Type.INTEGER,
                        description="How many items one craft produces.",
                    ),
                },
                required=["slots", "outputItem", "outputAmount"],
            ),
        )
    ]
)
