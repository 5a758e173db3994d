from dataclasses import asdict, dataclass, field, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class Card:
    """
    A single card within a set.

    Attributes:
        id: PokeData card id
        set_id: PokeData set id. Required: the set code alone is ambiguous.
        name: Card name
        card_number: Number within the set, leading zeros preserved ("002")
        set_code: Denormalized set code, may be absent
        set_name: Denormalized set name
        rarity: Rarity label, when known
        pricing: Price source -> amount (graded sources nest grade -> amount)
        image_small: Small image URL, None until enhanced
        image_large: Large image URL, None until enhanced
    """

    id: str
    set_id: int
    name: str
    card_number: str = ""
    set_code: str | None = None
    set_name: str | None = None
    rarity: str | None = None
    pricing: dict[str, Any] = field(default_factory=dict)
    image_small: str | None = None
    image_large: str | None = None

    def with_images(self, small: str, large: str) -> "Card":
        return replace(self, image_small=small, image_large=large)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Card":
        return cls(
            id=str(data["id"]),
            set_id=int(data["set_id"]),
            name=str(data.get("name") or ""),
            card_number=str(data.get("card_number") or ""),
            set_code=data.get("set_code"),
            set_name=data.get("set_name"),
            rarity=data.get("rarity"),
            pricing=dict(data.get("pricing") or {}),
            image_small=data.get("image_small"),
            image_large=data.get("image_large"),
        )
