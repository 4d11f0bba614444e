"""
Pioneer DDJ-REV1 controller description.

Hardware specifications:
- 2 physical decks, each switchable between layers 1/3 and 2/4 (4 logical decks)
- 8 performance pads per deck with single colour LEDs
- Touch sensitive jog wheels
- 14-bit tempo sliders (MSB + LSB control change pair)
- 2 effect units with 3 effect slots each

================================================================================
MIDI CHANNEL LAYOUT
================================================================================

Status bytes are 0x9n (note) and 0xBn (control change); the channel nibble n
selects the sub-channel:

    n = 0x0-0x3   Deck strips 1-4 (sync, shift, jog, tempo, loop LED, VU meter)
    n = 0x4-0x5   Effect units 1-2
    n = 0x6       Browser / master
    n = 0x7-0xE   Performance pads: deck1, deck1+SHIFT, deck2, deck2+SHIFT, ...
    n = 0xF       "Special" channel (track loaded indicators)

--------------------------------------------------------------------------------
PERFORMANCE PADS
--------------------------------------------------------------------------------
Pad addresses are 0xMP: M selects the pad mode, P the pad (0-7).

    0x0P   Hot cue
    0x1P   Beat loop
    0x3P   Sampler
    0x4P   Keyboard
    0x5P   Pad FX
    0x2P, 0x6P, 0x7P are never lit by this mapping

Pressing a pad with SHIFT held sends the same address on the deck's shift
sub-channel (deck channel + 1). The LED on each layer is addressed the same way.

--------------------------------------------------------------------------------
LIGHTS
--------------------------------------------------------------------------------
    Loop indicator         note 0x14 on deck strip channel (SHIFT layer: 0x50)
    VU meter               CC 0x02 on deck strip channel, value 0-127
    Track loaded           note (deck - 1) on channel 0xF
    Effect slots 1-3       notes 0x70-0x72 on FX channel (SHIFT layer: 0x63, 0x06, 0x07)

Lights take velocity 0x7F (on) or 0x00 (off).

--------------------------------------------------------------------------------
STARTUP HANDSHAKE
--------------------------------------------------------------------------------
    F0 00 40 05 00 00 02 06 00 03 01 F7

Asks the controller to report the current position of every knob and slider.
================================================================================
"""

from enum import IntEnum

import mido

from deckbound.controls import ControlKind, LogicalControl, MessageClass, SPECIAL_CHANNEL
from deckbound.groups import DeckGroup, PreviewDeckGroup, SamplerGroup
from deckbound.plugin import ControllerPlugin


class SubChannel(IntEnum):
    """MIDI channel nibbles used by the DDJ-REV1."""

    CH1 = 0x00
    CH2 = 0x01
    CH3 = 0x02
    CH4 = 0x03
    FX1 = 0x04
    FX2 = 0x05
    BROWSER = 0x06
    DECK1 = 0x07
    DECK1_SHIFT = 0x08
    DECK2 = 0x09
    DECK2_SHIFT = 0x0A
    DECK3 = 0x0B
    DECK3_SHIFT = 0x0C
    DECK4 = 0x0D
    DECK4_SHIFT = 0x0E
    SPECIAL = SPECIAL_CHANNEL


DECK_COUNT = 4
PAD_COUNT = 8
SAMPLER_COUNT = 16

LIGHT_ON = 0x7F
LIGHT_OFF = 0x00

# Deck strip channel (0-3) → deck index (1-4) is channel + 1
DECK_STRIP_CHANNELS = (SubChannel.CH1, SubChannel.CH2, SubChannel.CH3, SubChannel.CH4)
PAD_CHANNELS = (SubChannel.DECK1, SubChannel.DECK2, SubChannel.DECK3, SubChannel.DECK4)
FX_CHANNELS = (SubChannel.FX1, SubChannel.FX2)

# Light addresses
AUTO_LOOP_LIGHT = 0x14
AUTO_LOOP_SHIFT_LIGHT = 0x50
VU_METER_CC = 0x02
FX_SLOT_LIGHTS = (0x70, 0x71, 0x72)
FX_SLOT_SHIFT_LIGHTS = (0x63, 0x06, 0x07)

# Pad modes (high nibble of the pad address)
PAD_MODE_HOTCUE = 0x00
PAD_MODE_SAMPLER = 0x30
PAD_MODES = tuple(range(0x00, 0x80, 0x10))
UNLIT_PAD_MODES = (0x20, 0x60, 0x70)

# Deck strip input addresses
SHIFT_BUTTON = 0x3F
SYNC_BUTTON = 0x58
SYNC_SHIFT_BUTTON = 0x5C
JOG_TOUCH = 0x36
JOG_TOUCH_SHIFT = 0x67
JOG_TURN_SIDE = 0x21
JOG_TURN_PLATTER = 0x22
JOG_SEARCH = 0x29
TEMPO_SLIDER_MSB = 0x00
TEMPO_SLIDER_LSB = 0x20
DECK_SELECT_BUTTON = 0x72
BROWSE_BUTTON = 0x41

HANDSHAKE = (0xF0, 0x00, 0x40, 0x05, 0x00, 0x00, 0x02, 0x06, 0x00, 0x03, 0x01, 0xF7)


def pad_channel(deck: int) -> int:
    """Performance pad channel of a deck (shift layer is one higher)."""
    return int(PAD_CHANNELS[deck - 1])


def sampler_for_pad(deck: int, pad: int) -> int:
    """
    Sampler index driven by a sampler-mode pad.

    Decks 1 and 3 play samplers 1-8, decks 2 and 4 play samplers 9-16.

    Args:
        deck: Deck index (1-4)
        pad: Pad number (1-8)

    Returns:
        Sampler index (1-16)
    """
    return pad if deck % 2 == 1 else pad + PAD_COUNT


class PioneerDDJREV1Plugin(ControllerPlugin):
    """Description of the Pioneer DDJ-REV1."""

    @property
    def name(self) -> str:
        """Plugin name."""
        return "Pioneer DDJ-REV1"

    @property
    def port_patterns(self) -> list[str]:
        """Port name patterns for locating the device."""
        return ["DDJ-REV1", "DDJ REV1"]

    def get_input_mappings(self) -> list[LogicalControl]:
        """
        Build the input table.

        Returns:
            List of logical controls, see module docstring for the layout
        """
        controls = []

        for deck_index in range(1, DECK_COUNT + 1):
            deck_group = DeckGroup(index=deck_index)
            strip = int(DECK_STRIP_CHANNELS[deck_index - 1])
            pads = pad_channel(deck_index)

            def strip_control(kind: ControlKind, address: int, message_class=MessageClass.NOTE):
                return LogicalControl(
                    kind=kind,
                    message_class=message_class,
                    channel=strip,
                    address=address,
                    group=deck_group,
                    deck=deck_index,
                )

            # Performance pads: hot cue and sampler modes, primary and SHIFT layer
            for pad in range(PAD_COUNT):
                for channel, kind in (
                    (pads, ControlKind.HOTCUE_PAD),
                    (pads + 1, ControlKind.HOTCUE_PAD_SHIFT),
                ):
                    controls.append(
                        LogicalControl(
                            kind=kind,
                            message_class=MessageClass.NOTE,
                            channel=channel,
                            address=PAD_MODE_HOTCUE + pad,
                            group=deck_group,
                            deck=deck_index,
                        )
                    )

                sampler_group = SamplerGroup(index=sampler_for_pad(deck_index, pad + 1))
                for channel, kind in (
                    (pads, ControlKind.SAMPLER_PAD),
                    (pads + 1, ControlKind.SAMPLER_PAD_SHIFT),
                ):
                    controls.append(
                        LogicalControl(
                            kind=kind,
                            message_class=MessageClass.NOTE,
                            channel=channel,
                            address=PAD_MODE_SAMPLER + pad,
                            group=sampler_group,
                            deck=deck_index,
                        )
                    )

            # Deck strip buttons
            controls.append(strip_control(ControlKind.SHIFT, SHIFT_BUTTON))
            controls.append(strip_control(ControlKind.SYNC, SYNC_BUTTON))
            controls.append(strip_control(ControlKind.SYNC_SHIFT, SYNC_SHIFT_BUTTON))
            controls.append(strip_control(ControlKind.DECK_SELECT, DECK_SELECT_BUTTON))

            # Jog wheel
            controls.append(strip_control(ControlKind.JOG_TOUCH, JOG_TOUCH))
            controls.append(strip_control(ControlKind.JOG_TOUCH, JOG_TOUCH_SHIFT))
            controls.append(strip_control(ControlKind.JOG_TURN, JOG_TURN_SIDE, MessageClass.CONTROL_CHANGE))
            controls.append(strip_control(ControlKind.JOG_TURN, JOG_TURN_PLATTER, MessageClass.CONTROL_CHANGE))
            controls.append(strip_control(ControlKind.JOG_SEARCH, JOG_SEARCH, MessageClass.CONTROL_CHANGE))

            # Tempo slider (14-bit)
            controls.append(
                strip_control(ControlKind.TEMPO_SLIDER_MSB, TEMPO_SLIDER_MSB, MessageClass.CONTROL_CHANGE)
            )
            controls.append(
                strip_control(ControlKind.TEMPO_SLIDER_LSB, TEMPO_SLIDER_LSB, MessageClass.CONTROL_CHANGE)
            )

        # Browser
        controls.append(
            LogicalControl(
                kind=ControlKind.BROWSE,
                message_class=MessageClass.NOTE,
                channel=int(SubChannel.BROWSER),
                address=BROWSE_BUTTON,
                group=PreviewDeckGroup(index=1),
            )
        )

        return controls

    def get_handshake(self) -> mido.Message:
        """Query the controller for current control positions."""
        return mido.Message.from_bytes(list(HANDSHAKE))
