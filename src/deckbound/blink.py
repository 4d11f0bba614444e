"""
Timed blinking of sampler pad lights.

While a sampler plays, its pad LED blinks on both the primary and the SHIFT
layer. The blink stops by itself once the sampler is observed to have
stopped, leaving the pad lit to show that the sampler is still loaded.
"""

from typing import Callable

from deckbound.engine import EngineBackend
from deckbound.feedback import IndicatorDriver
from deckbound.groups import SamplerGroup
from deckbound.logging_config import get_logger
from deckbound.plugins.pioneer_ddj_rev1 import LIGHT_ON, PAD_COUNT, PAD_MODE_SAMPLER, pad_channel
from deckbound.scheduler import PollingScheduler

logger = get_logger(__name__)

BlinkKey = tuple[int, int]


def sampler_light(sampler_index: int) -> tuple[int, tuple[int, int]]:
    """
    Pad LED address and pad channels for a sampler.

    Samplers 1-8 light pads on decks 1 and 3, samplers 9-16 the same pads on
    decks 2 and 4: the hardware has 8 pad LEDs per side shared by two banks.

    Args:
        sampler_index: Sampler (1-16)

    Returns:
        (address, (channel_a, channel_b))
    """
    pad = sampler_index - PAD_COUNT if sampler_index > PAD_COUNT else sampler_index
    address = PAD_MODE_SAMPLER + (pad - 1)

    if sampler_index <= PAD_COUNT:
        channels = (pad_channel(1), pad_channel(3))
    else:
        channels = (pad_channel(2), pad_channel(4))

    return address, channels


class _BlinkTimer:
    """One running blink: scheduler handle plus the value last written."""

    def __init__(self, channel: int, address: int, group: SamplerGroup):
        self.channel = channel
        self.address = address
        self.group = group
        self.value = LIGHT_ON
        self.handle: int = 0


class BlinkController:
    """
    Per-(channel, address) blink timers.

    Starting a blink always cancels the existing timer for the same key
    first, so there is never more than one timer per key.
    """

    def __init__(
        self,
        scheduler: PollingScheduler,
        engine: EngineBackend,
        indicators: IndicatorDriver,
        interval_ms: int = 250,
    ):
        self._scheduler = scheduler
        self._engine = engine
        self._indicators = indicators
        self._interval_ms = interval_ms
        self._timers: dict[BlinkKey, _BlinkTimer] = {}

    def start_blink(self, channel: int, address: int, group: SamplerGroup) -> None:
        """
        Start blinking a pad until the monitored sampler stops playing.

        Args:
            channel: Primary pad channel (the SHIFT layer is channel + 1)
            address: Pad LED address
            group: Sampler whose `play` parameter ends the blink
        """
        self.stop_blink(channel, address)

        blink = _BlinkTimer(channel, address, group)
        blink.handle = self._scheduler.begin_timer(self._interval_ms, self._make_tick(blink))
        self._timers[(channel, address)] = blink
        logger.debug(f"Blinking pad 0x{address:02X} on channel {channel} for {group.key}")

    def stop_blink(self, channel: int, address: int) -> None:
        """Cancel a blink; unknown keys are ignored."""
        blink = self._timers.pop((channel, address), None)
        if blink is not None:
            self._scheduler.cancel_timer(blink.handle)

    def stop_all(self) -> None:
        """Cancel every running blink without touching the lights."""
        for key in list(self._timers):
            self.stop_blink(*key)

    def start_sampler_blink(self, sampler_index: int) -> None:
        """Blink the pads mirroring a sampler that just started playing."""
        address, channels = sampler_light(sampler_index)
        group = SamplerGroup(index=sampler_index)
        for channel in channels:
            self.start_blink(channel, address, group)

    def is_blinking(self, channel: int, address: int) -> bool:
        return (channel, address) in self._timers

    @property
    def active_keys(self) -> list[BlinkKey]:
        return sorted(self._timers)

    def _make_tick(self, blink: _BlinkTimer) -> Callable[[], None]:
        def tick() -> None:
            blink.value = LIGHT_ON - blink.value

            self._indicators.set_pad_light(blink.channel, blink.address, blink.value)
            self._indicators.set_pad_light(blink.channel + 1, blink.address, blink.value)

            if self._engine.get_parameter(blink.group, "play") < 1:
                self.stop_blink(blink.channel, blink.address)
                self._indicators.set_pad_light(blink.channel, blink.address, LIGHT_ON)
                self._indicators.set_pad_light(blink.channel + 1, blink.address, LIGHT_ON)

        tick.__name__ = f"blink_{blink.channel}_{blink.address:02x}"
        return tick
