"""
Main Controller API - lifecycle of the DDJ-REV1 mapping.

The Controller wires the pieces together: it owns the transport, the control
registry, the session state, the indicator driver, the blink controller and
the engine binding. connect() runs the startup sequence that puts the
hardware into a known state, disconnect() runs the shutdown sequence that
leaves no light lit.
"""

from typing import Callable, Optional

import mido

from deckbound.binding import EngineBinding
from deckbound.blink import BlinkController
from deckbound.config import MappingConfig
from deckbound.engine import EngineBackend
from deckbound.feedback import IndicatorDriver
from deckbound.groups import AppGroup, DeckGroup, EffectSlotGroup, EffectUnitGroup
from deckbound.logging_config import get_logger
from deckbound.midi_io import MIDIInterface
from deckbound.plugin import ControllerPlugin
from deckbound.plugins.pioneer_ddj_rev1 import (
    DECK_COUNT,
    PAD_CHANNELS,
    PAD_COUNT,
    PAD_MODES,
    SAMPLER_COUNT,
    UNLIT_PAD_MODES,
    PioneerDDJREV1Plugin,
)
from deckbound.registry import ControlRegistry
from deckbound.scheduler import PollingScheduler
from deckbound.state import SessionContext

logger = get_logger(__name__)

EFFECT_UNITS = 2
EFFECTS_PER_UNIT = 3


class Controller:
    """
    User-facing entry point of the mapping.

    Without an injected send_message the controller opens the device's MIDI
    ports itself on connect(). With one, no ports are opened: outgoing
    messages go to send_message and input is fed through on_midi_message().
    """

    def __init__(
        self,
        engine: EngineBackend,
        plugin: Optional[ControllerPlugin] = None,
        config: Optional[MappingConfig] = None,
        send_message: Optional[Callable[[mido.Message], None]] = None,
        scheduler: Optional[PollingScheduler] = None,
        auto_connect: bool = False,
    ):
        """
        Initialize controller.

        Args:
            engine: Host mixing engine
            plugin: Hardware description (defaults to the DDJ-REV1)
            config: Mapping tunables (defaults to MappingConfig())
            send_message: Optional transport write function replacing the MIDI ports
            scheduler: Timer scheduler (defaults to a monotonic-clock PollingScheduler)
            auto_connect: If True, connect immediately
        """
        self._engine = engine
        self._plugin = plugin or PioneerDDJREV1Plugin()
        self._config = config or MappingConfig()
        self._send_override = send_message
        self._scheduler = scheduler or PollingScheduler()

        self._midi: Optional[MIDIInterface] = None
        self._connected = False

        self._registry = ControlRegistry.from_plugin(self._plugin)
        self._session = SessionContext()
        self._indicators = IndicatorDriver(self._send_message, vu_adjust=self._config.vu_adjust)
        self._blinks = BlinkController(
            self._scheduler,
            self._engine,
            self._indicators,
            interval_ms=self._config.blink_interval_ms,
        )
        self._binding = EngineBinding(self._engine, self._indicators, self._blinks, self._session, self._config)

        if auto_connect:
            self.connect()

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def plugin(self) -> ControllerPlugin:
        return self._plugin

    @property
    def config(self) -> MappingConfig:
        return self._config

    @property
    def registry(self) -> ControlRegistry:
        return self._registry

    @property
    def scheduler(self) -> PollingScheduler:
        return self._scheduler

    @property
    def blinks(self) -> BlinkController:
        return self._blinks

    @property
    def session(self) -> SessionContext:
        """
        Live session state.

        Raises:
            RuntimeError: If not connected
        """
        self._ensure_connected()
        return self._session

    def connect(self, input_port: Optional[str] = None, output_port: Optional[str] = None) -> None:
        """
        Open the transport and run the startup sequence.

        Args:
            input_port: Input port name (found from the plugin's port patterns if None)
            output_port: Output port name (found from the plugin's port patterns if None)

        Raises:
            IOError: If no ports are found or they cannot be opened
        """
        if self._connected:
            logger.warning("Already connected")
            return

        if self._send_override is None:
            if input_port is None or output_port is None:
                found_inputs, found_outputs = MIDIInterface.find_ports(self._plugin.port_patterns)
                if input_port is None and found_inputs:
                    input_port = found_inputs[0]
                if output_port is None and found_outputs:
                    output_port = found_outputs[0]

                if not input_port and not output_port:
                    raise IOError(f"Could not find MIDI ports for '{self._plugin.name}'")

            midi = MIDIInterface(on_message=self.on_midi_message)
            midi.connect(input_port, output_port)
            self._midi = midi

        self._session.reset()

        logger.info(f"Initializing controller: {self._plugin.name}")
        self._startup()
        self._connected = True

        logger.info(f"Connected to {self._plugin.name} (input: {input_port}, output: {output_port})")

    def disconnect(self) -> None:
        """Run the shutdown sequence and close the transport. Safe to call twice."""
        if not self._connected:
            return

        logger.info(f"Shutting down controller: {self._plugin.name}")
        self._shutdown()
        self._connected = False

        if self._midi is not None:
            self._midi.disconnect()
            self._midi = None

        logger.info("Controller disconnected")

    # Startup / shutdown sequences

    def _startup(self) -> None:
        engine = self._engine
        binding = self._binding

        engine.set_parameter(EffectUnitGroup(rack=1, unit=1), "show_focus", 1)

        for deck in range(1, DECK_COUNT + 1):
            group = DeckGroup(index=deck)
            binding.connect_vu_meter(deck)
            self._indicators.set_vu_meter_state(deck - 1, 0)
            engine.soft_takeover(group, "rate", True)
            binding.connect_track_loaded(deck)
            # Startup animation: light the deck's track loaded indicator
            self._indicators.set_track_loaded_light(deck, True)
            binding.connect_loop_enabled(deck)

        for unit in range(1, EFFECT_UNITS + 1):
            for effect in range(1, EFFECTS_PER_UNIT + 1):
                engine.soft_takeover(EffectSlotGroup(rack=1, unit=unit, effect=effect), "meta", True)
                binding.connect_fx_enabled(unit, effect)

        app = AppGroup()
        if engine.get_parameter(app, "num_samplers") < SAMPLER_COUNT:
            engine.set_parameter(app, "num_samplers", SAMPLER_COUNT)

        for sampler_index in range(1, SAMPLER_COUNT + 1):
            binding.connect_sampler_play(sampler_index)

        handshake = self._plugin.get_handshake()
        if handshake is not None:
            self._indicators.send_handshake(handshake)

    def _shutdown(self) -> None:
        self._blinks.stop_all()
        self._binding.disconnect_all()

        for deck in range(1, DECK_COUNT + 1):
            self._indicators.set_vu_meter_state(deck - 1, 0)
            self._indicators.set_reloop_light(deck - 1, False)
            self._indicators.set_track_loaded_light(deck, False)

        # Both layers of every pad channel (deck N and deck N + SHIFT)
        pad_channels = [int(channel) + layer for channel in PAD_CHANNELS for layer in (0, 1)]
        for mode in PAD_MODES:
            if mode in UNLIT_PAD_MODES:
                continue
            for pad in range(PAD_COUNT):
                for channel in pad_channels:
                    self._indicators.set_indicator_state(channel, mode + pad, False)

        for unit in range(1, EFFECT_UNITS + 1):
            for effect in range(1, EFFECTS_PER_UNIT + 1):
                self._indicators.set_fx_light(unit, effect, False)

    # Processing

    def on_midi_message(self, msg: mido.Message) -> None:
        """
        Dispatch one incoming MIDI message.

        Unmapped messages are dropped. Handler errors are logged and never
        propagate to the caller.

        Args:
            msg: Incoming MIDI message
        """
        if not self._connected:
            logger.debug(f"Ignoring message while disconnected: {msg}")
            return

        resolved = self._registry.resolve_message(msg)
        if resolved is None:
            return

        control, value = resolved
        try:
            self._binding.handle(control, value)
        except Exception as e:
            logger.exception(f"Error handling {control}: {e}")

    def process_events(self) -> int:
        """
        Dispatch queued MIDI input, then run due timers.

        Call this regularly from the main loop; every handler runs on the
        calling thread.

        Returns:
            Number of MIDI messages processed
        """
        count = 0
        if self._midi is not None:
            count = self._midi.process_pending_messages()

        self._scheduler.run_due()
        return count

    # Context manager support

    def __enter__(self):
        if not self._connected:
            self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
        return False

    # Internal methods

    def _ensure_connected(self) -> None:
        """Raise error if not connected."""
        if not self._connected:
            raise RuntimeError("Controller not connected. Call connect() first.")

    def _send_message(self, msg: mido.Message) -> None:
        if self._send_override is not None:
            self._send_override(msg)
        elif self._midi is not None:
            self._midi.send_message(msg)
