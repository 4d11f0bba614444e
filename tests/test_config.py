"""
Tests for mapping configuration models.
"""

import pytest
from pydantic import ValidationError

from deckbound.config import MappingConfig, ScratchConfig


class TestScratchConfig:
    def test_defaults(self):
        scratch = ScratchConfig()

        assert scratch.intervals_per_rev == 720
        assert scratch.rpm == pytest.approx(33.333, abs=1e-3)
        assert scratch.alpha == 0.125
        assert scratch.beta == 0.125 / 32

    def test_beta_follows_alpha(self):
        assert ScratchConfig(alpha=0.25).beta == 0.25 / 32

    def test_explicit_beta(self):
        assert ScratchConfig(beta=0.01).beta == 0.01

    def test_rejects_non_positive(self):
        with pytest.raises(ValidationError):
            ScratchConfig(intervals_per_rev=0)


class TestMappingConfig:
    """Test MappingConfig defaults and validation."""

    def test_defaults(self):
        config = MappingConfig()

        assert config.vinyl_mode is True
        assert config.vu_adjust == 125
        assert config.blink_interval_ms == 250
        assert config.bend_scale == 0.8
        assert config.fast_seek_scale == 150
        assert config.tempo_ranges == [0.06, 0.10, 0.16, 0.25]

    def test_empty_tempo_ranges_rejected(self):
        with pytest.raises(ValidationError, match="cannot be empty"):
            MappingConfig(tempo_ranges=[])

    def test_negative_tempo_range_rejected(self):
        with pytest.raises(ValidationError, match="positive"):
            MappingConfig(tempo_ranges=[0.06, -0.1])

    def test_invalid_blink_interval(self):
        with pytest.raises(ValidationError):
            MappingConfig(blink_interval_ms=0)

    def test_frozen(self):
        config = MappingConfig()

        with pytest.raises(ValidationError):
            config.vinyl_mode = False

    def test_nested_scratch_from_dict(self):
        config = MappingConfig(scratch={"alpha": 0.5})

        assert config.scratch.beta == 0.5 / 32
