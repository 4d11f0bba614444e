"""
Engine group identifiers.

The host engine addresses its parameters by group. Groups are modelled as a
closed set of frozen pydantic models, one per kind, so handlers receive a
typed value (deck index, sampler index, ...) instead of parsing strings.
Each group still renders the host's string key through `key`.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class _GroupBase(BaseModel):
    model_config = {"frozen": True}

    @property
    def key(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.key


class DeckGroup(_GroupBase):
    """Mixing channel (deck) 1-4."""

    kind: Literal["deck"] = "deck"
    index: int = Field(ge=1, le=4)

    @property
    def key(self) -> str:
        return f"deck-{self.index}"


class EffectUnitGroup(_GroupBase):
    """Effect unit within an effect rack."""

    kind: Literal["effect_unit"] = "effect_unit"
    rack: int = Field(ge=1)
    unit: int = Field(ge=1)

    @property
    def key(self) -> str:
        return f"effect-rack-{self.rack}-unit-{self.unit}"


class EffectSlotGroup(_GroupBase):
    """Single effect slot inside an effect unit."""

    kind: Literal["effect_slot"] = "effect_slot"
    rack: int = Field(ge=1)
    unit: int = Field(ge=1)
    effect: int = Field(ge=1)

    @property
    def key(self) -> str:
        return f"effect-rack-{self.rack}-unit-{self.unit}-effect-{self.effect}"


class SamplerGroup(_GroupBase):
    """Sampler slot 1-16."""

    kind: Literal["sampler"] = "sampler"
    index: int = Field(ge=1, le=16)

    @property
    def key(self) -> str:
        return f"sampler-{self.index}"


class PreviewDeckGroup(_GroupBase):
    """Library preview deck."""

    kind: Literal["preview_deck"] = "preview_deck"
    index: int = Field(default=1, ge=1)

    @property
    def key(self) -> str:
        return f"preview-deck-{self.index}"


class AppGroup(_GroupBase):
    """Application-wide parameters (e.g. number of samplers)."""

    kind: Literal["app"] = "app"

    @property
    def key(self) -> str:
        return "app"


Group = Annotated[
    Union[DeckGroup, EffectUnitGroup, EffectSlotGroup, SamplerGroup, PreviewDeckGroup, AppGroup],
    Field(discriminator="kind"),
]


def deck(index: int) -> DeckGroup:
    return DeckGroup(index=index)


def sampler(index: int) -> SamplerGroup:
    return SamplerGroup(index=index)


def effect_slot(unit: int, effect: int, rack: int = 1) -> EffectSlotGroup:
    return EffectSlotGroup(rack=rack, unit=unit, effect=effect)
