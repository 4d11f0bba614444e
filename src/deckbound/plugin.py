"""
Hardware description interface.

A plugin describes one controller model: how to find its ports, the table of
inputs it sends and the handshake it expects on startup. The mapping core
(registry, binding, lifecycle) is driven entirely from this description.
"""

from abc import ABC, abstractmethod
from typing import Optional

import mido

from deckbound.controls import LogicalControl


class ControllerPlugin(ABC):
    """
    Abstract base class for controller descriptions.

    Plugins define:
    - Port name patterns for locating the device
    - The static input table (raw address → logical control)
    - The startup handshake message, if any
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Plugin name (should match controller name).

        Returns:
            Controller name (e.g., "Pioneer DDJ-REV1")
        """
        pass

    @property
    def port_patterns(self) -> list[str]:
        """
        Port name patterns used to find the device's MIDI ports.

        Returns:
            List of case-insensitive substrings
        """
        return []

    @abstractmethod
    def get_input_mappings(self) -> list[LogicalControl]:
        """
        Get the complete input table.

        Returns:
            One LogicalControl per (message class, channel, address) the
            device sends
        """
        pass

    def get_handshake(self) -> Optional[mido.Message]:
        """
        Message sent once at startup after all lights are initialised.

        Returns:
            SysEx message, or None if the device needs no handshake
        """
        return None
