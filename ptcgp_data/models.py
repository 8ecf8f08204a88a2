"""
PTCGP set and card models.

Only the fields the exporter reads or writes are declared; everything else
in a tcgdex record is kept as an extra field and written back out as is.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class CardCount(BaseModel):
    """Card totals of a set."""

    model_config = ConfigDict(extra="allow")

    official: int = Field(
        description="Number of cards printed in the set, secret rares excluded.",
    )


class Booster(BaseModel):
    """A booster pack of a set."""

    model_config = ConfigDict(extra="allow")

    name: Dict[str, str] = Field(
        description="Booster name by language code.",
    )


class SetInfo(BaseModel):
    """A release grouping of cards."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str = Field(
        description="Unique identifier of the set.",
    )
    name: Dict[str, str] | None = Field(
        default=None,
        description="Set name by language code.",
    )
    card_count: CardCount | None = Field(
        default=None,
        alias="cardCount",
        description="Number of cards in the set.",
    )
    boosters: Dict[str, Booster] | None = Field(
        default=None,
        description="Boosters of the set, keyed by booster id.",
    )
    release_date: str | None = Field(
        default=None,
        alias="releaseDate",
        description="Release date in ISO 8601 format.",
    )


class Card(BaseModel):
    """An individual card."""

    model_config = ConfigDict(extra="allow")

    set_id: str = Field(
        description="Identifier of the set this card belongs to.",
    )
    boosters: List[str] | None = Field(
        default=None,
        description="Ids of the boosters this card can be pulled from.",
    )


def to_json(record: BaseModel) -> Dict[str, Any]:
    """
    Serialize a record with upstream field names, keeping unknown fields
    and leaving out fields the source never had
    :param record: Set or card
    :return: JSON compatible dict
    """
    never_set = {
        name for name in type(record).model_fields if name not in record.model_fields_set
    }
    return record.model_dump(mode="json", by_alias=True, exclude=never_set)
