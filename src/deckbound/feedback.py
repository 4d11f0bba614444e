"""
Indicator driver: turns logical light changes into outgoing MIDI.

The driver keeps no state. Every call is translated straight into one or more
fire-and-forget sends.
"""

from typing import Callable

import mido

from deckbound.logging_config import get_logger
from deckbound.plugins.pioneer_ddj_rev1 import (
    AUTO_LOOP_LIGHT,
    AUTO_LOOP_SHIFT_LIGHT,
    FX_CHANNELS,
    FX_SLOT_LIGHTS,
    FX_SLOT_SHIFT_LIGHTS,
    LIGHT_OFF,
    LIGHT_ON,
    SubChannel,
    VU_METER_CC,
)

logger = get_logger(__name__)

SendMessage = Callable[[mido.Message], None]


def scale_vu_level(level: float, vu_adjust: float) -> int:
    """
    Convert an engine VU level (0.0-1.0) into a 7-bit MIDI value.

    The product is truncated and clamped to the MIDI data byte range.
    """
    return max(0, min(127, int(level * vu_adjust)))


class IndicatorDriver:
    """
    Writes status lights on the controller.

    Two-level lights take 0x7F (on) or 0x00 (off); the VU meters take a
    continuous value.
    """

    def __init__(self, send_message: SendMessage, vu_adjust: float = 125):
        """
        Args:
            send_message: Transport write function
            vu_adjust: VU calibration factor
        """
        self._send_message = send_message
        self._vu_adjust = vu_adjust

    def set_indicator_state(self, channel: int, address: int, active: bool) -> None:
        """
        Turn one light on or off.

        Args:
            channel: MIDI channel of the light
            address: Note number of the light
            active: Light on when truthy
        """
        velocity = LIGHT_ON if active else LIGHT_OFF
        self._send_message(mido.Message("note_on", channel=int(channel), note=address, velocity=velocity))

    def set_vu_meter_state(self, channel: int, level: float) -> None:
        """
        Update a deck's VU meter.

        Args:
            channel: Deck strip channel (0-3)
            level: Engine VU level (0.0-1.0)
        """
        value = scale_vu_level(level, self._vu_adjust)
        self._send_message(mido.Message("control_change", channel=channel, control=VU_METER_CC, value=value))

    def set_reloop_light(self, channel: int, active: bool) -> None:
        """
        Set the loop indicator on both the primary and the SHIFT layer.

        The hardware has two LEDs for the one loop-enabled state.
        """
        self.set_indicator_state(channel, AUTO_LOOP_LIGHT, active)
        self.set_indicator_state(channel, AUTO_LOOP_SHIFT_LIGHT, active)

    def set_fx_light(self, unit: int, effect: int, active: bool) -> None:
        """
        Set an effect slot light on both layers.

        Args:
            unit: Effect unit (1-2)
            effect: Effect slot within the unit (1-3)
            active: Light on when truthy
        """
        channel = FX_CHANNELS[unit - 1]
        self.set_indicator_state(channel, FX_SLOT_LIGHTS[effect - 1], active)
        self.set_indicator_state(channel, FX_SLOT_SHIFT_LIGHTS[effect - 1], active)

    def set_track_loaded_light(self, deck: int, active: bool) -> None:
        """Set a deck's track loaded indicator on the special channel."""
        self.set_indicator_state(SubChannel.SPECIAL, deck - 1, active)

    def set_pad_light(self, channel: int, address: int, value: int) -> None:
        """Write a raw pad LED value (used by the blink controller)."""
        self._send_message(mido.Message("note_on", channel=channel, note=address, velocity=value))

    def send_handshake(self, message: mido.Message) -> None:
        """Send the startup SysEx handshake."""
        logger.debug(f"Sending handshake: {message.hex()}")
        self._send_message(message)
