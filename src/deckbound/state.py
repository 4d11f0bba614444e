"""
Session state of the mapping.

Everything mutable that handlers share lives in one SessionContext owned by
the controller: the SHIFT modifier, the preview deck flag and per-deck state.
Dispatch is strictly serial, so none of this is locked.
"""

from typing import Optional

from deckbound.plugins.pioneer_ddj_rev1 import DECK_COUNT


class DeckState:
    """
    State of one mixing channel.

    Holds the last tempo slider MSB fragment and a mirror of the channel's
    lights as last written by the mapping.
    """

    def __init__(self, index: int):
        self.index = index
        self.tempo_msb: Optional[int] = None
        self.vu_level: float = 0.0
        self.loop_active: bool = False
        self.track_loaded: bool = False

    def store_tempo_msb(self, value: int) -> None:
        self.tempo_msb = value

    def tempo_msb_or_default(self) -> int:
        """Stored MSB fragment; 0 if no MSB has arrived yet."""
        return self.tempo_msb if self.tempo_msb is not None else 0

    def __repr__(self) -> str:
        return (
            f"DeckState(index={self.index}, tempo_msb={self.tempo_msb}, vu_level={self.vu_level}, "
            f"loop_active={self.loop_active}, track_loaded={self.track_loaded})"
        )


class SessionContext:
    """
    Mutable state shared by the mapping's handlers.

    Attributes:
        shift_active: SHIFT currently held
        preview_seek_enabled: Preview deck was started from the browse button
        decks: DeckState per deck index (1-4)
    """

    def __init__(self):
        self.shift_active = False
        self.preview_seek_enabled = False
        self.decks: dict[int, DeckState] = {i: DeckState(i) for i in range(1, DECK_COUNT + 1)}

    def deck(self, index: int) -> DeckState:
        """
        Get a deck's state.

        Raises:
            KeyError: If index is not 1-4
        """
        return self.decks[index]

    def reset(self) -> None:
        """Return to the startup state."""
        self.shift_active = False
        self.preview_seek_enabled = False
        self.decks = {i: DeckState(i) for i in range(1, DECK_COUNT + 1)}
