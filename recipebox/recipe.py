"""Recipe data model shared by the similarity and scaling engines."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .amounts import InvalidAmountError, parse_optional_amount


@dataclass
class Ingredient:
    """A single ingredient line of a recipe."""

    name: str  # Empty string means "no name"
    amount: float | None = None
    unit: str | None = None
    notes: str | None = None  # e.g., "finely chopped"
    id: str | None = None

    def __str__(self) -> str:
        parts = []
        if self.amount is not None:
            amount = self.amount
            parts.append(str(int(amount)) if amount == int(amount) else str(amount))
        if self.unit:
            parts.append(self.unit)
        parts.append(self.name)
        if self.notes:
            parts.append(f"({self.notes})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ingredient": self.name,
            "amount": self.amount,
            "unit": self.unit,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Ingredient":
        """
        Build an ingredient from the external field contract.

        Raises:
            InvalidAmountError: If "amount" is present but not a finite number
        """
        name = data.get("ingredient", data.get("name"))
        ingredient_id = data.get("id")
        return cls(
            name=str(name) if name is not None else "",
            amount=parse_optional_amount(data.get("amount")),
            unit=data.get("unit") or None,
            notes=data.get("notes") or None,
            id=str(ingredient_id) if ingredient_id is not None else None,
        )


@dataclass
class Instruction:
    """A numbered preparation step."""

    step_number: int
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"stepNumber": self.step_number, "instruction": self.text}


def build_instructions(items: Iterable[Any]) -> list[Instruction]:
    """
    Build instructions from plain strings or {"instruction": ...} mappings.

    Steps are renumbered 1..n in the given order.
    """
    instructions = []
    for index, item in enumerate(items, 1):
        if isinstance(item, Instruction):
            text = item.text
        elif isinstance(item, Mapping):
            text = item.get("instruction", item.get("text")) or ""
        else:
            text = str(item) if item is not None else ""
        instructions.append(Instruction(step_number=index, text=str(text)))
    return instructions


def _optional_number(value: Any, label: str) -> float | None:
    """Whole numbers come back as int, fractional ones are kept as float."""
    try:
        number = parse_optional_amount(value)
    except InvalidAmountError as e:
        raise InvalidAmountError(f"Invalid {label}: {value!r}") from e
    if number is None:
        return None
    return int(number) if number.is_integer() else number


@dataclass
class Recipe:
    """A recipe snapshot as consumed by the engines."""

    title: str
    ingredients: list[Ingredient] = field(default_factory=list)
    instructions: list[Instruction] = field(default_factory=list)
    description: str | None = None
    servings: float | None = None
    prep_time: float | None = None  # minutes
    cook_time: float | None = None  # minutes
    id: str | None = None
    source_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def total_time(self) -> float:
        return (self.prep_time or 0) + (self.cook_time or 0)

    def to_dict(self) -> dict[str, Any]:
        """Convert recipe to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "servings": self.servings,
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
            "sourceUrl": self.source_url,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "instructions": [inst.to_dict() for inst in self.instructions],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Recipe":
        """
        Create recipe from a dictionary in the external field contract.

        Missing collections default to empty and missing scalars to None.
        Both camelCase and snake_case keys are accepted.
        """

        def pick(camel: str, snake: str) -> Any:
            return data.get(camel, data.get(snake))

        recipe_id = data.get("id")
        return cls(
            title=data.get("title") or "",
            description=data.get("description"),
            servings=_optional_number(data.get("servings"), "servings"),
            prep_time=_optional_number(pick("prepTime", "prep_time"), "prep time"),
            cook_time=_optional_number(pick("cookTime", "cook_time"), "cook time"),
            ingredients=[Ingredient.from_dict(ing) for ing in data.get("ingredients") or []],
            instructions=build_instructions(data.get("instructions") or []),
            id=str(recipe_id) if recipe_id is not None else None,
            source_url=pick("sourceUrl", "source_url"),
            created_at=pick("createdAt", "created_at"),
            updated_at=pick("updatedAt", "updated_at"),
        )
