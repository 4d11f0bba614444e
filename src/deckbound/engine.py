"""
Host mixing engine boundary.

The mapping core never talks to a concrete mixer. It reads and writes named
parameters, subscribes to changes and drives the engine's scratch emulation
through EngineBackend. InMemoryEngine is a plain parameter store implementing
the same interface, used by the demo script and the tests.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Optional

from deckbound.callbacks import Connection, ConnectionManager, ParameterCallback
from deckbound.groups import Group
from deckbound.logging_config import get_logger

logger = get_logger(__name__)


class EngineBackend(ABC):
    """
    Capabilities the mapping core needs from the host engine.

    All calls are assumed to succeed. Subscriber callbacks receive
    (value, group) and are invoked on the dispatch thread.
    """

    @abstractmethod
    def get_parameter(self, group: Group, name: str) -> float:
        """Current value of a parameter (0.0 if never set)."""
        pass

    @abstractmethod
    def set_parameter(self, group: Group, name: str, value: float) -> None:
        """Write a parameter."""
        pass

    @abstractmethod
    def subscribe(self, group: Group, name: str, callback: ParameterCallback) -> Connection:
        """
        Subscribe to changes of a parameter.

        Returns:
            Connection handle; call disconnect() to unsubscribe
        """
        pass

    @abstractmethod
    def trigger_action(self, group: Group, name: str) -> None:
        """Fire a one-shot action parameter."""
        pass

    @abstractmethod
    def soft_takeover(self, group: Group, name: str, enabled: bool) -> None:
        """Enable or disable soft-takeover for a parameter."""
        pass

    @abstractmethod
    def is_scratch_active(self, deck: int) -> bool:
        pass

    @abstractmethod
    def scratch_enable(self, deck: int, intervals_per_rev: int, rpm: float, alpha: float, beta: float) -> None:
        """Start a scratch session on a deck."""
        pass

    @abstractmethod
    def scratch_tick(self, deck: int, interval: int) -> None:
        """Feed relative platter motion to an active scratch session."""
        pass

    @abstractmethod
    def scratch_disable(self, deck: int) -> None:
        pass


class InMemoryEngine(EngineBackend):
    """
    Dictionary backed engine.

    Setting a parameter to a new value notifies its subscribers; writing the
    value it already has does nothing. Actions, soft-takeover flags and
    scratch calls are recorded for inspection.
    """

    def __init__(self, initial: Optional[dict[tuple[Group, str], float]] = None):
        """
        Args:
            initial: Optional starting values keyed by (group, parameter)
        """
        self._values: dict[tuple[str, str], float] = {}
        self._connections = ConnectionManager()

        self.actions: list[tuple[str, str]] = []
        self.soft_takeover_enabled: dict[tuple[str, str], bool] = {}
        self.scratching: dict[int, bool] = defaultdict(bool)
        self.scratch_params: dict[int, tuple[int, float, float, float]] = {}
        self.scratch_ticks: dict[int, list[int]] = defaultdict(list)

        for (group, name), value in (initial or {}).items():
            self._values[(group.key, name)] = float(value)

    @property
    def connections(self) -> ConnectionManager:
        return self._connections

    def get_parameter(self, group: Group, name: str) -> float:
        return self._values.get((group.key, name), 0.0)

    def set_parameter(self, group: Group, name: str, value: float) -> None:
        value = float(value)
        key = (group.key, name)
        if self._values.get(key) == value:
            return

        self._values[key] = value
        logger.debug(f"{group.key}.{name} = {value}")
        self._connections.dispatch(group, name, value)

    def subscribe(self, group: Group, name: str, callback: ParameterCallback) -> Connection:
        return self._connections.register(group, name, callback)

    def trigger_action(self, group: Group, name: str) -> None:
        self.actions.append((group.key, name))
        self.set_parameter(group, name, 1)
        self.set_parameter(group, name, 0)

    def soft_takeover(self, group: Group, name: str, enabled: bool) -> None:
        self.soft_takeover_enabled[(group.key, name)] = enabled

    def is_scratch_active(self, deck: int) -> bool:
        return self.scratching[deck]

    def scratch_enable(self, deck: int, intervals_per_rev: int, rpm: float, alpha: float, beta: float) -> None:
        self.scratching[deck] = True
        self.scratch_params[deck] = (intervals_per_rev, rpm, alpha, beta)

    def scratch_tick(self, deck: int, interval: int) -> None:
        self.scratch_ticks[deck].append(interval)

    def scratch_disable(self, deck: int) -> None:
        self.scratching[deck] = False
