#!/usr/bin/env python3
"""
Demo script for the Pioneer DDJ-REV1.

This script demonstrates:
- Running the mapping against an in-memory engine
- Watching engine parameters the controller writes (hot cues, rate, jog, sync)
- Driving the controller's lights from the engine: a fake VU meter and a
  sampler that plays for a few seconds so its pad blinks
"""

import logging
import math
import time
from functools import partial

from deckbound.config import MappingConfig
from deckbound.controller import Controller
from deckbound.engine import InMemoryEngine
from deckbound.groups import DeckGroup, SamplerGroup
from deckbound.logging_config import get_logger, set_module_level, setup_logging
from deckbound.plugins.pioneer_ddj_rev1 import PioneerDDJREV1Plugin

# Set up rich logging to see what's happening
setup_logging(level=logging.INFO)

logger = get_logger(__name__)

# Enable debug logging to see every dispatched control
set_module_level("deckbound.binding", logging.DEBUG)

WATCHED = ["rate", "jog", "beatsync", "sync_enabled", "rateRange"] + [f"hotcue_{n}_activate" for n in range(1, 9)]


def on_engine_change(name: str, value: float, group) -> None:
    """Print parameters written by the controller."""
    print(f"[ENGINE] {group.key}.{name}: {value:+.3f}")


def main():
    """Main demo function."""
    print("\n" + "=" * 60)
    print("Pioneer DDJ-REV1 Demo")
    print("=" * 60)

    print("\n1. Creating engine and controller...")
    engine = InMemoryEngine()
    plugin = PioneerDDJREV1Plugin()
    controller = Controller(engine, plugin=plugin, config=MappingConfig())
    print(f"   ✓ Controller created: {plugin.name}")

    print("\n2. Watching engine parameters...")
    for deck in range(1, 5):
        for name in WATCHED:
            engine.subscribe(DeckGroup(index=deck), name, partial(on_engine_change, name))
    print(f"   ✓ Watching {len(WATCHED)} parameters on 4 decks")

    print("\n3. Connecting to controller...")
    try:
        controller.connect()
        print("   ✓ Connected successfully!")
    except IOError as e:
        print(f"   ✗ Failed to connect: {e}")
        print("\nMake sure your DDJ-REV1 is connected via USB.")
        return

    print("\n" + "=" * 60)
    print(f"Controls: {len(controller.registry)} mapped inputs")
    print("Listening for events... (Press Ctrl+C to exit)")
    print("=" * 60)
    print("\nTry:")
    print("  - Press hot cue pads, move the tempo sliders, turn and touch the jog wheels")
    print("  - Hold SHIFT and press deck select to cycle the rate range")
    print("  - Watch deck 1's VU meter and sampler 1's pad blink")
    print("")

    sampler = SamplerGroup(index=1)
    engine.set_parameter(sampler, "track_loaded", 1)
    engine.set_parameter(sampler, "play", 1)
    started = time.monotonic()

    try:
        while True:
            controller.process_events()

            elapsed = time.monotonic() - started
            engine.set_parameter(DeckGroup(index=1), "vu_meter", round(abs(math.sin(elapsed * 2)), 2))
            if elapsed > 5:
                engine.set_parameter(sampler, "play", 0)

            # Sleep briefly to avoid busy-waiting
            time.sleep(0.01)

    except KeyboardInterrupt:
        print("\n\nShutting down...")

    finally:
        controller.disconnect()
        print("✓ Disconnected from controller")
        print("\nDemo complete!")


if __name__ == "__main__":
    main()
