"""
Error-isolated engine subscription dispatch.

Engine parameter subscriptions are stored per (group, parameter). A failing
subscriber is logged and skipped so it cannot stop the others, and nothing
propagates back into the code that changed the parameter.
"""

from collections import defaultdict
from typing import Callable, Optional

from deckbound.groups import Group
from deckbound.logging_config import get_logger

logger = get_logger(__name__)

# Callback type signature: (value, group) -> None
ParameterCallback = Callable[[float, Group], None]

ConnectionKey = tuple[str, str]


class Connection:
    """Handle for one subscription; disconnect() is idempotent."""

    def __init__(self, manager: "ConnectionManager", group: Group, name: str, callback: ParameterCallback):
        self._manager = manager
        self.group = group
        self.name = name
        self.callback = callback
        self._connected = True

    @property
    def is_connected(self) -> bool:
        return self._connected

    def disconnect(self) -> bool:
        """
        Remove the subscription.

        Returns:
            True if it was connected
        """
        if not self._connected:
            return False
        self._connected = False
        return self._manager.unregister(self)


class ConnectionManager:
    """
    Subscriptions keyed by engine group and parameter name.

    Callbacks for one parameter run in registration order.
    """

    def __init__(self):
        self._connections: defaultdict[ConnectionKey, list[Connection]] = defaultdict(list)

    def register(self, group: Group, name: str, callback: ParameterCallback) -> Connection:
        """
        Subscribe to a parameter.

        Args:
            group: Engine group
            name: Parameter name
            callback: Function(value, group) -> None

        Returns:
            Connection handle
        """
        connection = Connection(self, group, name, callback)
        self._connections[(group.key, name)].append(connection)
        callback_name = getattr(callback, "__name__", repr(callback))
        logger.debug(f"Connected {group.key}.{name} -> {callback_name}")
        return connection

    def unregister(self, connection: Connection) -> bool:
        key = (connection.group.key, connection.name)
        connections = self._connections.get(key)
        if connections and connection in connections:
            connections.remove(connection)
            if not connections:
                del self._connections[key]
            logger.debug(f"Disconnected {connection.group.key}.{connection.name}")
            return True
        return False

    def dispatch(self, group: Group, name: str, value: float) -> None:
        """
        Notify every subscriber of a parameter change.

        Args:
            group: Engine group whose parameter changed
            name: Parameter name
            value: New value
        """
        # Copy so callbacks may disconnect themselves
        connections = list(self._connections.get((group.key, name), ()))

        for connection in connections:
            if connection.is_connected:
                self._safe_call(connection.callback, value, group)

    def _safe_call(self, callback: Callable, *args) -> None:
        """
        Execute callback with exception isolation.

        Args:
            callback: Callable to execute
            *args: Arguments to pass to callback
        """
        try:
            callback(*args)
        except Exception as e:
            callback_name = getattr(callback, "__name__", repr(callback))
            logger.exception(f"Error in callback '{callback_name}': {e}")

    def count(self, group: Optional[Group] = None, name: Optional[str] = None) -> int:
        """
        Number of live subscriptions, optionally filtered.

        Args:
            group: Only count this group
            name: Only count this parameter
        """
        return sum(
            len(connections)
            for (group_key, param), connections in self._connections.items()
            if (group is None or group_key == group.key) and (name is None or param == name)
        )

    def clear_all(self) -> None:
        """Drop every subscription."""
        for connections in self._connections.values():
            for connection in connections:
                connection._connected = False
        self._connections.clear()
        logger.debug("Cleared all connections")
