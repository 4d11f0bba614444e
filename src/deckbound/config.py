"""
Pydantic configuration models for the DDJ-REV1 mapping.

The defaults reproduce the feel of the stock mapping. They are tunables, not
user settings: nothing here is loaded from or saved to disk.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class ScratchConfig(BaseModel):
    """
    Physical parameters handed to the engine when a scratch session starts.

    alpha and beta are the smoothing constants of the engine's scratch filter;
    they trade responsiveness against latency and must stay at these values
    for the platter to feel right.
    """

    intervals_per_rev: int = Field(default=720, gt=0)
    rpm: float = Field(default=33 + 1 / 3, gt=0)
    alpha: float = Field(default=1.0 / 8, gt=0)
    beta: Optional[float] = Field(default=None, gt=0)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def default_beta(self):
        """Derive beta from alpha when not given explicitly."""
        if self.beta is None:
            object.__setattr__(self, "beta", self.alpha / 32)
        return self


class MappingConfig(BaseModel):
    """
    Tunables for the mapping core.

    Attributes:
        vinyl_mode: Touching a jog wheel starts a scratch session
        vu_adjust: Calibration factor from engine VU level (0.0-1.0) to MIDI value
        blink_interval_ms: Period of the sampler pad blink
        bend_scale: Jog wheel pitch bend multiplier (not scratching)
        fast_seek_scale: Jog wheel multiplier while seeking with SHIFT held
        tempo_ranges: Rate ranges cycled by SHIFT + deck select
        scratch: Scratch session parameters
    """

    vinyl_mode: bool = True
    vu_adjust: float = Field(default=125, gt=0)
    blink_interval_ms: int = Field(default=250, gt=0)
    bend_scale: float = 0.8
    fast_seek_scale: float = 150
    tempo_ranges: list[float] = Field(default_factory=lambda: [0.06, 0.10, 0.16, 0.25])
    scratch: ScratchConfig = Field(default_factory=ScratchConfig)

    model_config = {"frozen": True}

    @field_validator("tempo_ranges")
    @classmethod
    def validate_tempo_ranges(cls, v):
        if not v:
            raise ValueError("tempo_ranges cannot be empty")
        if any(r <= 0 for r in v):
            raise ValueError("tempo_ranges must all be positive")
        return v
