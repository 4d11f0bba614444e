"""Pytest fixtures for the mapping core.

Provides:
- sent: list recording every MIDI message the code under test sends
- engine: InMemoryEngine
- clock / scheduler: PollingScheduler driven by a manually advanced clock
- board: LightBoard replaying sent messages into current light values
- controller: connected Controller wired to all of the above
"""

from types import SimpleNamespace

import mido
import pytest

from deckbound.controller import Controller
from deckbound.engine import InMemoryEngine
from deckbound.feedback import IndicatorDriver
from deckbound.scheduler import PollingScheduler


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class LightBoard:
    """Replays sent messages into the last value written to each light.

    Note messages are keyed by (channel, note), control changes by
    (channel, control).
    """

    def __init__(self, sent: list):
        self._sent = sent

    @property
    def notes(self) -> dict:
        values = {}
        for msg in self._sent:
            if msg.type == "note_on":
                values[(msg.channel, msg.note)] = msg.velocity
            elif msg.type == "note_off":
                values[(msg.channel, msg.note)] = 0
        return values

    @property
    def controls(self) -> dict:
        values = {}
        for msg in self._sent:
            if msg.type == "control_change":
                values[(msg.channel, msg.control)] = msg.value
        return values

    def lit(self) -> set:
        """(channel, note) pairs whose last value is non-zero."""
        return {key for key, value in self.notes.items() if value > 0}

    def value(self, channel: int, note: int):
        return self.notes.get((channel, note))

    def vu(self, deck: int):
        return self.controls.get((deck - 1, 0x02))


@pytest.fixture
def sent():
    """List of every mido.Message sent."""
    return []


@pytest.fixture
def engine():
    return InMemoryEngine()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return PollingScheduler(clock=clock)


@pytest.fixture
def board(sent):
    return LightBoard(sent)


@pytest.fixture
def indicators(sent):
    return IndicatorDriver(sent.append)


@pytest.fixture
def controller(engine, sent, scheduler):
    """Connected controller; disconnected on teardown."""
    ctrl = Controller(engine, send_message=sent.append, scheduler=scheduler)
    ctrl.connect()
    yield ctrl
    ctrl.disconnect()


def note_on(channel: int, note: int, velocity: int = 0x7F) -> mido.Message:
    return mido.Message("note_on", channel=channel, note=note, velocity=velocity)


def note_off(channel: int, note: int) -> mido.Message:
    return mido.Message("note_off", channel=channel, note=note, velocity=0)


def cc(channel: int, control: int, value: int) -> mido.Message:
    return mido.Message("control_change", channel=channel, control=control, value=value)


@pytest.fixture
def midi():
    """Message builders: midi.note_on(ch, note), midi.note_off(ch, note), midi.cc(ch, control, value)."""
    return SimpleNamespace(note_on=note_on, note_off=note_off, cc=cc)
