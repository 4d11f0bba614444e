"""
Logical control identities for the mapping core.

A LogicalControl is what a raw (message class, channel, address) triple
resolves to: the kind of control, the deck it belongs to and the engine group
it acts on. Controls are immutable and built once from the plugin's mapping
table.
"""

from enum import Enum
from typing import Optional

import mido
from pydantic import BaseModel, Field

from deckbound.groups import Group

# MIDI channel used by the controller's "special" message class (status 0x9F)
SPECIAL_CHANNEL = 0x0F


class MessageClass(str, Enum):
    """Message classes the controller sends and receives."""

    NOTE = "note"  # press/release (note on/off)
    CONTROL_CHANGE = "control_change"  # continuous values
    SPECIAL = "special"  # note messages on channel 15

    @classmethod
    def of(cls, msg: mido.Message) -> Optional["MessageClass"]:
        """
        Classify a mido message.

        Args:
            msg: Incoming MIDI message

        Returns:
            Message class, or None for message types the controller never uses
        """
        if msg.type in ("note_on", "note_off"):
            return cls.SPECIAL if msg.channel == SPECIAL_CHANNEL else cls.NOTE
        if msg.type == "control_change":
            return cls.CONTROL_CHANGE
        return None


class ControlKind(str, Enum):
    """Every kind of input the mapping dispatches."""

    HOTCUE_PAD = "hotcue_pad"
    HOTCUE_PAD_SHIFT = "hotcue_pad_shift"
    SAMPLER_PAD = "sampler_pad"
    SAMPLER_PAD_SHIFT = "sampler_pad_shift"
    TEMPO_SLIDER_MSB = "tempo_slider_msb"
    TEMPO_SLIDER_LSB = "tempo_slider_lsb"
    JOG_TURN = "jog_turn"
    JOG_SEARCH = "jog_search"
    JOG_TOUCH = "jog_touch"
    SYNC = "sync"
    SYNC_SHIFT = "sync_shift"
    SHIFT = "shift"
    BROWSE = "browse"
    DECK_SELECT = "deck_select"


class LogicalControl(BaseModel):
    """
    Immutable identity of one physical input.

    The same (channel, address) pair is used to decode input and, for
    controls with a light, to address feedback.
    """

    kind: ControlKind
    message_class: MessageClass
    channel: int = Field(ge=0, le=15)
    address: int = Field(ge=0, le=127)
    group: Group
    deck: Optional[int] = Field(default=None, ge=1, le=4)

    model_config = {"frozen": True}

    @property
    def key(self) -> tuple[MessageClass, int, int]:
        """Registry lookup key."""
        return (self.message_class, self.channel, self.address)

    def __str__(self) -> str:
        return f"{self.kind.value}[{self.group.key}] ch={self.channel} addr=0x{self.address:02X}"
