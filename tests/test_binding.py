"""
Tests for input handling and engine → light routing.

Input is fed as raw MIDI through a connected controller so every test covers
resolution, transformation and the handler together.
"""

import pytest

from deckbound.config import MappingConfig, ScratchConfig
from deckbound.controller import Controller
from deckbound.groups import DeckGroup, EffectSlotGroup, PreviewDeckGroup, SamplerGroup

DECK1 = DeckGroup(index=1)
PREVIEW = PreviewDeckGroup(index=1)


class TestPads:
    """Test hot cue and sampler pad handlers."""

    def test_hotcue_activate(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(7, 0x02))
        assert engine.get_parameter(DECK1, "hotcue_3_activate") == 1.0

        controller.on_midi_message(midi.note_off(7, 0x02))
        assert engine.get_parameter(DECK1, "hotcue_3_activate") == 0.0

    def test_hotcue_clear_on_shift_layer(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(8, 0x00))

        assert engine.get_parameter(DECK1, "hotcue_1_clear") == 1.0
        assert engine.get_parameter(DECK1, "hotcue_1_activate") == 0.0

    def test_hotcue_on_deck_4(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(13, 0x07))

        assert engine.get_parameter(DeckGroup(index=4), "hotcue_8_activate") == 1.0

    def test_sampler_pad_loads_empty_sampler(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(7, 0x30))

        assert engine.get_parameter(SamplerGroup(index=1), "LoadSelectedTrack") == 1.0
        assert engine.get_parameter(SamplerGroup(index=1), "cue_gotoandplay") == 0.0

    def test_sampler_pad_plays_loaded_sampler(self, controller, engine, midi):
        sampler = SamplerGroup(index=9)
        engine.set_parameter(sampler, "track_loaded", 1)

        controller.on_midi_message(midi.note_on(9, 0x30))

        assert engine.get_parameter(sampler, "cue_gotoandplay") == 1.0
        assert engine.get_parameter(sampler, "LoadSelectedTrack") == 0.0

    def test_sampler_shift_stops_playing(self, controller, engine, midi):
        sampler = SamplerGroup(index=2)
        engine.set_parameter(sampler, "track_loaded", 1)
        engine.set_parameter(sampler, "play", 1)

        controller.on_midi_message(midi.note_on(8, 0x31))

        assert engine.get_parameter(sampler, "cue_gotoandstop") == 1.0
        assert engine.get_parameter(sampler, "eject") == 0.0

    def test_sampler_shift_ejects_stopped(self, controller, engine, midi):
        sampler = SamplerGroup(index=2)
        engine.set_parameter(sampler, "track_loaded", 1)

        controller.on_midi_message(midi.note_on(8, 0x31))

        assert engine.get_parameter(sampler, "eject") == 1.0

    def test_sampler_shift_empty_does_nothing(self, controller, engine, midi):
        sampler = SamplerGroup(index=2)

        controller.on_midi_message(midi.note_on(8, 0x31))

        assert engine.get_parameter(sampler, "eject") == 0.0
        assert engine.get_parameter(sampler, "cue_gotoandstop") == 0.0


class TestTempoSlider:
    """Test 14-bit tempo slider handling."""

    def test_msb_then_lsb(self, controller, engine, midi):
        controller.on_midi_message(midi.cc(0, 0x00, 0x40))
        controller.on_midi_message(midi.cc(0, 0x20, 0x00))

        assert engine.get_parameter(DECK1, "rate") == 0.0

    def test_full_travel(self, controller, engine, midi):
        controller.on_midi_message(midi.cc(1, 0x00, 0x7F))
        controller.on_midi_message(midi.cc(1, 0x20, 0x7F))

        assert engine.get_parameter(DeckGroup(index=2), "rate") == pytest.approx(1 - 0x3FFF / 0x2000)

    def test_msb_alone_writes_nothing(self, controller, engine, midi):
        controller.on_midi_message(midi.cc(0, 0x00, 0x10))

        assert engine.get_parameter(DECK1, "rate") == 0.0
        assert controller.session.deck(1).tempo_msb == 0x10

    def test_lsb_without_msb_uses_zero(self, controller, engine, midi):
        controller.on_midi_message(midi.cc(0, 0x20, 0x00))

        assert engine.get_parameter(DECK1, "rate") == 1.0

    def test_repeated_pair_idempotent(self, controller, engine, midi):
        rates = []
        engine.subscribe(DECK1, "rate", lambda v, g: rates.append(v))

        for _ in range(2):
            controller.on_midi_message(midi.cc(0, 0x00, 0x30))
            controller.on_midi_message(midi.cc(0, 0x20, 0x05))

        expected = 1 - ((0x30 << 7) + 0x05) / 0x2000
        assert engine.get_parameter(DECK1, "rate") == pytest.approx(expected)
        assert rates == [pytest.approx(expected)]

    def test_decks_independent(self, controller, engine, midi):
        controller.on_midi_message(midi.cc(0, 0x00, 0x7F))
        controller.on_midi_message(midi.cc(2, 0x20, 0x00))

        assert engine.get_parameter(DeckGroup(index=3), "rate") == 1.0


class TestJogWheel:
    """Test jog turn, search and touch."""

    def test_bend_when_not_scratching(self, controller, engine, midi):
        controller.on_midi_message(midi.cc(0, 0x21, 70))

        assert engine.get_parameter(DECK1, "jog") == pytest.approx(6 * 0.8)
        assert engine.scratch_ticks[1] == []

    def test_touch_starts_scratch(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(0, 0x36))

        assert engine.is_scratch_active(1)
        assert engine.scratch_params[1] == (720, pytest.approx(100 / 3), 0.125, 0.125 / 32)

    def test_turn_while_scratching_ticks(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(0, 0x36))
        controller.on_midi_message(midi.cc(0, 0x22, 60))

        assert engine.scratch_ticks[1] == [-4]
        assert engine.get_parameter(DECK1, "jog") == 0.0

    def test_release_ends_scratch(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(0, 0x36))
        controller.on_midi_message(midi.note_off(0, 0x36))

        assert not engine.is_scratch_active(1)

    def test_shifted_touch(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(1, 0x67))

        assert engine.is_scratch_active(2)

    def test_search(self, controller, engine, midi):
        controller.on_midi_message(midi.cc(0, 0x29, 65))

        assert engine.get_parameter(DECK1, "jog") == 150.0

    def test_search_ignores_scratch(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(0, 0x36))
        controller.on_midi_message(midi.cc(0, 0x29, 63))

        assert engine.get_parameter(DECK1, "jog") == -150.0
        assert engine.scratch_ticks[1] == []

    def test_touch_without_vinyl_mode(self, engine, sent, scheduler, midi):
        ctrl = Controller(
            engine,
            config=MappingConfig(vinyl_mode=False),
            send_message=sent.append,
            scheduler=scheduler,
        )
        ctrl.connect()

        ctrl.on_midi_message(midi.note_on(0, 0x36))
        ctrl.on_midi_message(midi.cc(0, 0x21, 66))

        assert not engine.is_scratch_active(1)
        assert engine.get_parameter(DECK1, "jog") == pytest.approx(2 * 0.8)
        ctrl.disconnect()

    def test_custom_scratch_config(self, engine, sent, scheduler, midi):
        config = MappingConfig(scratch=ScratchConfig(intervals_per_rev=360, alpha=0.25))
        ctrl = Controller(engine, config=config, send_message=sent.append, scheduler=scheduler)
        ctrl.connect()

        ctrl.on_midi_message(midi.note_on(0, 0x36))

        assert engine.scratch_params[1][0] == 360
        assert engine.scratch_params[1][3] == 0.25 / 32
        ctrl.disconnect()


class TestSync:
    """Test SYNC decision table."""

    def test_beatsync(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(0, 0x58))
        assert engine.get_parameter(DECK1, "beatsync") == 1.0

        controller.on_midi_message(midi.note_off(0, 0x58))
        assert engine.get_parameter(DECK1, "beatsync") == 0.0

    def test_press_releases_sync_lock(self, controller, engine, midi):
        engine.set_parameter(DECK1, "sync_enabled", 1)

        controller.on_midi_message(midi.note_on(0, 0x58))

        assert engine.get_parameter(DECK1, "sync_enabled") == 0.0
        assert engine.get_parameter(DECK1, "beatsync") == 0.0

    def test_shift_enables_sync_lock(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(0, 0x5C))
        assert engine.get_parameter(DECK1, "sync_enabled") == 1.0

        controller.on_midi_message(midi.note_off(0, 0x5C))
        assert engine.get_parameter(DECK1, "sync_enabled") == 1.0


class TestShiftAndBrowse:
    """Test SHIFT tracking, track preview and rate range cycling."""

    def test_shift_state(self, controller, midi):
        controller.on_midi_message(midi.note_on(2, 0x3F))
        assert controller.session.shift_active is True

        controller.on_midi_message(midi.note_off(2, 0x3F))
        assert controller.session.shift_active is False

    def test_browse_starts_preview(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(6, 0x41))

        assert engine.get_parameter(PREVIEW, "LoadSelectedTrackAndPlay") == 1.0
        assert controller.session.preview_seek_enabled is True

    def test_browse_stops_playing_preview(self, controller, engine, midi):
        engine.set_parameter(PREVIEW, "play", 1)
        controller.session.preview_seek_enabled = True

        controller.on_midi_message(midi.note_on(6, 0x41))

        assert engine.actions == [("preview-deck-1", "stop")]
        assert controller.session.preview_seek_enabled is False

    def test_browse_release_ignored(self, controller, engine, midi):
        controller.on_midi_message(midi.note_off(6, 0x41))

        assert engine.get_parameter(PREVIEW, "LoadSelectedTrackAndPlay") == 0.0
        assert controller.session.preview_seek_enabled is False

    def test_browse_ignored_with_shift(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(0, 0x3F))
        controller.on_midi_message(midi.note_on(6, 0x41))

        assert engine.get_parameter(PREVIEW, "LoadSelectedTrackAndPlay") == 0.0

    def test_deck_select_cycles_rate_range_with_shift(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(0, 0x3F))

        seen = []
        for _ in range(5):
            controller.on_midi_message(midi.note_on(0, 0x72))
            controller.on_midi_message(midi.note_off(0, 0x72))
            seen.append(engine.get_parameter(DECK1, "rateRange"))

        assert seen == [0.06, 0.10, 0.16, 0.25, 0.06]

    def test_deck_select_without_shift_ignored(self, controller, engine, midi):
        controller.on_midi_message(midi.note_on(0, 0x72))

        assert engine.get_parameter(DECK1, "rateRange") == 0.0


class TestEngineToLights:
    """Test engine parameter changes driving the controller's lights."""

    @pytest.mark.parametrize("deck", [1, 2, 3, 4])
    def test_vu_meter(self, controller, engine, sent, deck):
        sent.clear()

        engine.set_parameter(DeckGroup(index=deck), "vu_meter", 0.8)

        assert len(sent) == 1
        assert sent[0].type == "control_change"
        assert sent[0].channel == deck - 1
        assert sent[0].control == 0x02
        assert sent[0].value == int(0.8 * 125)

    def test_vu_meter_mirrored_in_session(self, controller, engine):
        engine.set_parameter(DeckGroup(index=3), "vu_meter", 0.5)

        assert controller.session.deck(3).vu_level == 0.5

    def test_loop_light(self, controller, engine, board):
        engine.set_parameter(DeckGroup(index=2), "loop_enabled", 1)
        assert board.value(1, 0x14) == 0x7F
        assert board.value(1, 0x50) == 0x7F

        engine.set_parameter(DeckGroup(index=2), "loop_enabled", 0)
        assert board.value(1, 0x14) == 0
        assert board.value(1, 0x50) == 0

    def test_track_loaded_light(self, controller, engine, board):
        engine.set_parameter(DeckGroup(index=1), "track_loaded", 1)
        engine.set_parameter(DeckGroup(index=1), "track_loaded", 0)

        assert board.value(15, 0) == 0
        assert controller.session.deck(1).track_loaded is False

    def test_fx_light(self, controller, engine, board):
        engine.set_parameter(EffectSlotGroup(rack=1, unit=2, effect=3), "enabled", 1)

        assert board.value(5, 0x72) == 0x7F
        assert board.value(5, 0x07) == 0x7F

    def test_sampler_play_starts_blink(self, controller, engine):
        engine.set_parameter(SamplerGroup(index=4), "play", 1)

        assert controller.blinks.active_keys == [(7, 0x33), (11, 0x33)]

    def test_sampler_nine_aliases_sampler_one(self, controller, engine, board, clock):
        """Sampler 9 blinks sampler 1's pad address on the deck 2 and deck 4 channels."""
        engine.set_parameter(SamplerGroup(index=9), "play", 1)
        clock.advance(0.25)
        controller.process_events()

        for channel in (9, 10, 13, 14):
            assert board.value(channel, 0x30) == 0
        for channel in (7, 8, 11, 12):
            assert board.value(channel, 0x30) is None

    def test_sampler_stop_ends_blink_lit(self, controller, engine, board, clock):
        engine.set_parameter(SamplerGroup(index=1), "play", 1)
        clock.advance(0.25)
        controller.process_events()

        engine.set_parameter(SamplerGroup(index=1), "play", 0)
        clock.advance(0.25)
        controller.process_events()

        assert controller.blinks.active_keys == []
        for channel in (7, 8, 11, 12):
            assert board.value(channel, 0x30) == 0x7F
