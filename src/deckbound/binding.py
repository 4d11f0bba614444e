"""
Engine binding layer.

Two directions:
- Input: handle() applies a resolved control and its raw value to the engine
  (or to session state such as SHIFT) through a per-kind handler table.
- Output: connect_*() subscribe to engine parameters and route changes to the
  indicator driver or the blink controller.

Groups are resolved when the table is built or when a subscription is made;
callbacks are bound with functools.partial so no handler parses group names.
"""

from functools import partial
from typing import Callable

from deckbound.blink import BlinkController
from deckbound.callbacks import Connection
from deckbound.config import MappingConfig
from deckbound.controls import ControlKind, LogicalControl
from deckbound.engine import EngineBackend
from deckbound.feedback import IndicatorDriver
from deckbound.groups import DeckGroup, EffectSlotGroup, Group, SamplerGroup
from deckbound.logging_config import get_logger
from deckbound.state import SessionContext
from deckbound.transforms import (
    BUTTON_PRESSED,
    button_value,
    combine_high_res,
    jog_delta,
    next_tempo_range,
    pad_number,
    tempo_rate,
)

logger = get_logger(__name__)

Handler = Callable[[LogicalControl, int], None]


class EngineBinding:
    """
    Applies controller input to the engine and engine state to the lights.
    """

    def __init__(
        self,
        engine: EngineBackend,
        indicators: IndicatorDriver,
        blinks: BlinkController,
        session: SessionContext,
        config: MappingConfig,
    ):
        self._engine = engine
        self._indicators = indicators
        self._blinks = blinks
        self._session = session
        self._config = config
        self._connections: list[Connection] = []

        self._handlers: dict[ControlKind, Handler] = {
            ControlKind.HOTCUE_PAD: self.hotcue_pad_press,
            ControlKind.HOTCUE_PAD_SHIFT: self.hotcue_pad_shift_press,
            ControlKind.SAMPLER_PAD: self.sampler_pad_press,
            ControlKind.SAMPLER_PAD_SHIFT: self.sampler_pad_shift_press,
            ControlKind.TEMPO_SLIDER_MSB: self.tempo_slider_msb,
            ControlKind.TEMPO_SLIDER_LSB: self.tempo_slider_lsb,
            ControlKind.JOG_TURN: self.jog_turn,
            ControlKind.JOG_SEARCH: self.jog_search,
            ControlKind.JOG_TOUCH: self.jog_touch,
            ControlKind.SYNC: self.sync_press,
            ControlKind.SYNC_SHIFT: self.sync_shift_press,
            ControlKind.SHIFT: self.shift_press,
            ControlKind.BROWSE: self.browse_press,
            ControlKind.DECK_SELECT: self.deck_select_press,
        }

    @property
    def session(self) -> SessionContext:
        return self._session

    # Input dispatch

    def handle(self, control: LogicalControl, value: int) -> None:
        """
        Apply one input event.

        Args:
            control: Resolved logical control
            value: Raw 7-bit value (velocity or CC value)
        """
        handler = self._handlers.get(control.kind)
        if handler is None:
            logger.debug(f"No handler for {control.kind}")
            return

        logger.debug(f"{control} value={value}")
        handler(control, value)

    # Pads

    def hotcue_pad_press(self, control: LogicalControl, value: int) -> None:
        pad = pad_number(control.address)
        self._engine.set_parameter(control.group, f"hotcue_{pad}_activate", button_value(value))

    def hotcue_pad_shift_press(self, control: LogicalControl, value: int) -> None:
        pad = pad_number(control.address)
        self._engine.set_parameter(control.group, f"hotcue_{pad}_clear", button_value(value))

    def sampler_pad_press(self, control: LogicalControl, value: int) -> None:
        """Play a loaded sampler from its cue point, or load the selected track into it."""
        group = control.group
        if self._engine.get_parameter(group, "track_loaded"):
            self._engine.set_parameter(group, "cue_gotoandplay", button_value(value))
        else:
            self._engine.set_parameter(group, "LoadSelectedTrack", button_value(value))

    def sampler_pad_shift_press(self, control: LogicalControl, value: int) -> None:
        """Stop a playing sampler, or eject a stopped one."""
        group = control.group
        if self._engine.get_parameter(group, "play"):
            self._engine.set_parameter(group, "cue_gotoandstop", button_value(value))
        elif self._engine.get_parameter(group, "track_loaded"):
            self._engine.set_parameter(group, "eject", button_value(value))

    # Tempo slider

    def tempo_slider_msb(self, control: LogicalControl, value: int) -> None:
        self._session.deck(control.deck).store_tempo_msb(value)

    def tempo_slider_lsb(self, control: LogicalControl, value: int) -> None:
        """
        Combine with the stored MSB and write the rate.

        Rate is inverted so that hardware and on-screen sliders move the same
        way regardless of the host's rate direction preference.
        """
        msb = self._session.deck(control.deck).tempo_msb_or_default()
        self._engine.set_parameter(control.group, "rate", tempo_rate(combine_high_res(msb, value)))

    # Jog wheel

    def jog_turn(self, control: LogicalControl, value: int) -> None:
        delta = jog_delta(value)
        if self._engine.is_scratch_active(control.deck):
            self._engine.scratch_tick(control.deck, delta)
        else:
            self._engine.set_parameter(control.group, "jog", delta * self._config.bend_scale)

    def jog_search(self, control: LogicalControl, value: int) -> None:
        """Fast seek with SHIFT held: always a jog write, never a scratch tick."""
        self._engine.set_parameter(control.group, "jog", jog_delta(value) * self._config.fast_seek_scale)

    def jog_touch(self, control: LogicalControl, value: int) -> None:
        if value != 0 and self._config.vinyl_mode:
            scratch = self._config.scratch
            self._engine.scratch_enable(control.deck, scratch.intervals_per_rev, scratch.rpm, scratch.alpha, scratch.beta)
        else:
            self._engine.scratch_disable(control.deck)

    # Sync

    def sync_press(self, control: LogicalControl, value: int) -> None:
        """Pressing SYNC while sync lock is on releases it; otherwise beat sync once."""
        if self._engine.get_parameter(control.group, "sync_enabled") and value > 0:
            self._engine.set_parameter(control.group, "sync_enabled", 0)
        else:
            self._engine.set_parameter(control.group, "beatsync", button_value(value))

    def sync_shift_press(self, control: LogicalControl, value: int) -> None:
        if value > 0:
            self._engine.set_parameter(control.group, "sync_enabled", 1)

    # Modifiers and browser

    def shift_press(self, control: LogicalControl, value: int) -> None:
        self._session.shift_active = value == BUTTON_PRESSED

    def browse_press(self, control: LogicalControl, value: int) -> None:
        """Toggle track preview of the selected library track."""
        if value == 0:
            return
        # SHIFT + browse belongs to the host's library navigation
        if self._session.shift_active:
            return

        preview = control.group
        if self._engine.get_parameter(preview, "play"):
            self._engine.trigger_action(preview, "stop")
            self._session.preview_seek_enabled = False
        else:
            self._engine.set_parameter(preview, "LoadSelectedTrackAndPlay", 1)
            self._session.preview_seek_enabled = True

    def deck_select_press(self, control: LogicalControl, value: int) -> None:
        """
        SHIFT + deck select cycles the deck's rate range.

        Without SHIFT the controller switches deck layers by itself.
        """
        if value == 0 or not self._session.shift_active:
            return

        current = self._engine.get_parameter(control.group, "rateRange")
        self._engine.set_parameter(control.group, "rateRange", next_tempo_range(current, self._config.tempo_ranges))

    # Engine → lights

    def connect_vu_meter(self, deck: int) -> Connection:
        return self._connect(DeckGroup(index=deck), "vu_meter", partial(self.on_vu_meter, deck))

    def connect_track_loaded(self, deck: int) -> Connection:
        return self._connect(DeckGroup(index=deck), "track_loaded", partial(self.on_track_loaded, deck))

    def connect_loop_enabled(self, deck: int) -> Connection:
        return self._connect(DeckGroup(index=deck), "loop_enabled", partial(self.on_loop_enabled, deck))

    def connect_fx_enabled(self, unit: int, effect: int) -> Connection:
        return self._connect(
            EffectSlotGroup(rack=1, unit=unit, effect=effect),
            "enabled",
            partial(self.on_fx_enabled, unit, effect),
        )

    def connect_sampler_play(self, sampler_index: int) -> Connection:
        return self._connect(SamplerGroup(index=sampler_index), "play", partial(self.on_sampler_play, sampler_index))

    def disconnect_all(self) -> None:
        """Drop every engine subscription made by this binding."""
        for connection in self._connections:
            connection.disconnect()
        self._connections.clear()

    @property
    def connections(self) -> list[Connection]:
        return list(self._connections)

    def on_vu_meter(self, deck: int, value: float, group: Group) -> None:
        self._session.deck(deck).vu_level = value
        self._indicators.set_vu_meter_state(deck - 1, value)

    def on_track_loaded(self, deck: int, value: float, group: Group) -> None:
        loaded = value > 0
        self._session.deck(deck).track_loaded = loaded
        self._indicators.set_track_loaded_light(deck, loaded)

    def on_loop_enabled(self, deck: int, value: float, group: Group) -> None:
        active = bool(value)
        self._session.deck(deck).loop_active = active
        self._indicators.set_reloop_light(deck - 1, active)

    def on_fx_enabled(self, unit: int, effect: int, value: float, group: Group) -> None:
        self._indicators.set_fx_light(unit, effect, bool(value))

    def on_sampler_play(self, sampler_index: int, value: float, group: Group) -> None:
        # Stop is detected by the blink timer itself
        if value == 0:
            return
        self._blinks.start_sampler_blink(sampler_index)

    def _connect(self, group: Group, name: str, callback) -> Connection:
        connection = self._engine.subscribe(group, name, callback)
        self._connections.append(connection)
        return connection
