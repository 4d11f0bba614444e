"""
Control registry: static lookup from raw MIDI addressing to logical controls.

The registry is intentionally partial. Anything the table does not list is
not an error, it is simply not dispatched.
"""

from typing import Iterator, Optional

import mido

from deckbound.controls import ControlKind, LogicalControl, MessageClass
from deckbound.logging_config import get_logger
from deckbound.plugin import ControllerPlugin

logger = get_logger(__name__)


class ControlRegistry:
    """
    Closed table of (message class, channel, address) → LogicalControl.

    Built once from a plugin's input mappings and never modified afterwards.
    """

    def __init__(self, controls: list[LogicalControl]):
        """
        Index controls by their lookup key.

        Args:
            controls: Complete input table

        Raises:
            ValueError: If two controls share the same key
        """
        self._controls: dict[tuple[MessageClass, int, int], LogicalControl] = {}

        for control in controls:
            if control.key in self._controls:
                raise ValueError(f"Duplicate mapping for {control.key}: {self._controls[control.key]} and {control}")
            self._controls[control.key] = control

        logger.debug(f"Control registry built with {len(self._controls)} entries")

    @classmethod
    def from_plugin(cls, plugin: ControllerPlugin) -> "ControlRegistry":
        """Build the registry from a plugin's input table."""
        return cls(plugin.get_input_mappings())

    def resolve(self, message_class: MessageClass, channel: int, address: int) -> Optional[LogicalControl]:
        """
        Look up a logical control.

        Args:
            message_class: Message class of the incoming message
            channel: MIDI channel (0-15)
            address: Note or controller number (0-127)

        Returns:
            LogicalControl, or None if the address is not mapped
        """
        return self._controls.get((message_class, channel, address))

    def resolve_message(self, msg: mido.Message) -> Optional[tuple[LogicalControl, int]]:
        """
        Resolve a mido message into its control and 7-bit value.

        Note off is reported as value 0, like a note on with zero velocity.

        Args:
            msg: Incoming MIDI message

        Returns:
            (control, value) tuple, or None if the message is not mapped
        """
        message_class = MessageClass.of(msg)
        if message_class is None:
            return None

        if message_class == MessageClass.CONTROL_CHANGE:
            address, value = msg.control, msg.value
        else:
            address = msg.note
            value = msg.velocity if msg.type == "note_on" else 0

        control = self.resolve(message_class, msg.channel, address)
        if control is None:
            logger.debug(f"No mapping for MIDI message: {msg}")
            return None

        return (control, value)

    def controls_of_kind(self, kind: ControlKind) -> list[LogicalControl]:
        """All controls of one kind, in table order."""
        return [control for control in self._controls.values() if control.kind == kind]

    def __len__(self) -> int:
        return len(self._controls)

    def __iter__(self) -> Iterator[LogicalControl]:
        return iter(self._controls.values())
