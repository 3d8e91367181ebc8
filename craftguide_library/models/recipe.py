"""Crafting recipe side-payload."""

from pydantic import Field

from .base import CamelCaseModel

EMPTY_SLOT = "air"


class CraftingRecipe(CamelCaseModel):
    """A 3x3 crafting-table recipe.

    Slots are listed row-major, top-left first. Empty slots hold "air"
    (an empty string is accepted and treated the same way).
    """

    slots: list[str] = Field(min_length=9, max_length=9, description="Nine item names, row-major")
    output_item: str = Field(min_length=1, description="Item produced")
    output_amount: int = Field(default=1, ge=1, description="Stack size produced")

    def grid(self) -> list[list[str]]:
        """Return the slots as three rows of three."""
        return [self.slots[row * 3 : row * 3 + 3] for row in range(3)]

    @staticmethod
    def is_empty_slot(item: str) -> bool:
        return not item or item.strip().lower() == EMPTY_SLOT
