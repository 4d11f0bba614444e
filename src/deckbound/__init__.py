"""
Deckbound: Pioneer DDJ-REV1 mapping core

Translates the controller's MIDI input into mixing engine parameter changes
and engine state back into the controller's lights. The host engine is
reached through the EngineBackend interface, the hardware through mido.
"""

__version__ = "0.1.0"

# Main API
from .binding import EngineBinding
from .blink import BlinkController

# Configuration models
from .config import MappingConfig, ScratchConfig
from .controller import Controller

# Controls and groups
from .controls import ControlKind, LogicalControl, MessageClass

# Engine boundary
from .engine import EngineBackend, InMemoryEngine
from .feedback import IndicatorDriver
from .groups import (
    AppGroup,
    DeckGroup,
    EffectSlotGroup,
    EffectUnitGroup,
    Group,
    PreviewDeckGroup,
    SamplerGroup,
)

# Logging configuration
from .logging_config import (
    get_logger,
    set_module_level,
    setup_logging,
)
from .midi_io import MIDIInterface

# Plugin development
from .plugin import ControllerPlugin

# Plugins
from .plugins.pioneer_ddj_rev1 import PioneerDDJREV1Plugin
from .registry import ControlRegistry
from .scheduler import PollingScheduler
from .state import DeckState, SessionContext

__all__ = [
    # Version
    "__version__",
    # Main API
    "Controller",
    "EngineBinding",
    "BlinkController",
    "IndicatorDriver",
    "ControlRegistry",
    "PollingScheduler",
    "MIDIInterface",
    # State
    "SessionContext",
    "DeckState",
    # Controls and groups
    "ControlKind",
    "LogicalControl",
    "MessageClass",
    "Group",
    "DeckGroup",
    "EffectUnitGroup",
    "EffectSlotGroup",
    "SamplerGroup",
    "PreviewDeckGroup",
    "AppGroup",
    # Engine boundary
    "EngineBackend",
    "InMemoryEngine",
    # Configuration models
    "MappingConfig",
    "ScratchConfig",
    # Logging configuration
    "setup_logging",
    "get_logger",
    "set_module_level",
    # Plugin development
    "ControllerPlugin",
    # Plugins
    "PioneerDDJREV1Plugin",
]
