"""
Controller descriptions for deckbound.
"""

from .pioneer_ddj_rev1 import PioneerDDJREV1Plugin

__all__ = [
    "PioneerDDJREV1Plugin",
]
