"""Tests for melody track scoring and selection."""

import pytest

from windkeys.core import PERCUSSION_CHANNEL, SourceNote, TrackData
from windkeys.inference import MelodyScorer, TrackSelector


def make_track(index, name, pitches, channel=0, step=0.5, length=0.4):
    """Create a track of evenly spaced notes."""
    notes = [
        SourceNote(pitch=p, channel=channel, start=i * step, length=length)
        for i, p in enumerate(pitches)
    ]
    return TrackData(index=index, name=name, notes=notes)


def scale_pitches(count, low=60):
    """A C-major scale pattern repeated up to count notes."""
    pattern = [0, 2, 4, 5, 7, 9, 11, 12, 14, 16]
    return [low + pattern[i % len(pattern)] for i in range(count)]


class TestMelodyScorer:
    """Tests for the point system."""

    def test_small_monophonic_track(self):
        track = make_track(0, "Piano", [60, 62, 64, 65, 67])
        result = MelodyScorer().score(track)

        # 200 in band + 150 monophonic - 200 for fewer than 10 notes
        assert result.score == pytest.approx(150.0)
        assert result.breakdown["note_count"] == -200.0
        assert "pitch_variety" not in result.breakdown

    def test_melody_keyword(self):
        track = make_track(0, "Lead Vocal", scale_pitches(60))
        result = MelodyScorer().score(track)
        assert result.breakdown["melody_name"] == 500.0
        # 500 + 200 + 150 + 100 (moderate count) + 80 (10 distinct pitches)
        assert result.score == pytest.approx(1030.0)

    def test_percussion_keyword_and_channel(self):
        track = make_track(0, "Drums", [36, 38, 42] * 20, channel=PERCUSSION_CHANNEL)
        result = MelodyScorer().score(track)
        assert result.breakdown["percussion_name"] == -500.0
        assert result.breakdown["percussion_channel"] == -1000.0
        assert result.score < 0

    def test_mixed_channels_not_disqualified(self):
        notes = [
            SourceNote(pitch=60, channel=PERCUSSION_CHANNEL, start=0.0, length=0.4),
            SourceNote(pitch=62, channel=0, start=0.5, length=0.4),
        ]
        result = MelodyScorer().score(TrackData(index=0, name="Mixed", notes=notes))
        assert "percussion_channel" not in result.breakdown

    def test_melodic_band_fraction(self):
        # Half the notes below the band
        track = make_track(0, "Bass", [36, 60] * 10)
        result = MelodyScorer().score(track)
        assert result.breakdown["melodic_range"] == pytest.approx(100.0)

    def test_very_large_track(self):
        track = make_track(0, "Piano", scale_pitches(2500), step=0.1, length=0.05)
        result = MelodyScorer().score(track)
        assert result.breakdown["note_count"] == 50.0


class TestMonophonyRatio:
    """Tests for the monophony measure."""

    def test_sequential_notes(self):
        track = make_track(0, "x", [60, 62, 64, 65])
        assert MelodyScorer.monophony_ratio(track.notes) == 1.0

    def test_block_chords(self):
        notes = []
        for i in range(4):
            for pitch in (60, 64, 67):
                notes.append(SourceNote(pitch=pitch, channel=0, start=i * 0.5, length=0.4))
        # Only the lowest note of each chord starts after the previous note ends
        assert MelodyScorer.monophony_ratio(notes) == pytest.approx(1 / 3)

    def test_legato_overlap(self):
        notes = [
            SourceNote(pitch=60, channel=0, start=0.0, length=0.6),
            SourceNote(pitch=62, channel=0, start=0.5, length=0.6),
        ]
        assert MelodyScorer.monophony_ratio(notes) == pytest.approx(0.5)

    def test_empty(self):
        assert MelodyScorer.monophony_ratio([]) == 0.0


class TestTrackSelector:
    """Tests for ranking and selection."""

    def test_no_tracks(self):
        selection = TrackSelector().select([])
        assert selection.is_empty
        assert selection.ranked == []

    def test_tracks_without_notes(self):
        tracks = [TrackData(index=0, name="Conductor"), TrackData(index=1, name="Empty")]
        assert TrackSelector().select(tracks).is_empty

    def test_single_track_auto_selected(self):
        tracks = [
            TrackData(index=0, name="Conductor"),
            make_track(1, "Drums", [36] * 5, channel=PERCUSSION_CHANNEL),
        ]
        selection = TrackSelector().select(tracks)
        assert selection.auto
        assert selection.selected.index == 1
        assert not selection.is_ambiguous

    def test_melody_ranked_first(self):
        tracks = [
            make_track(0, "Drums", [36, 38, 42] * 20, channel=PERCUSSION_CHANNEL),
            make_track(1, "Accompaniment", [48, 52, 55] * 20, step=0.0, length=1.0),
            make_track(2, "Melody", scale_pitches(60)),
        ]
        selection = TrackSelector().select(tracks)
        assert not selection.auto
        assert selection.is_ambiguous
        assert selection.selected.index == 2
        assert [s.index for s in selection.ranked][0] == 2
        assert selection.ranked[-1].index == 0

    def test_ties_keep_track_order(self):
        tracks = [
            make_track(0, "Piano A", scale_pitches(20)),
            make_track(1, "Piano B", scale_pitches(20)),
        ]
        ranked = TrackSelector().rank(tracks)
        assert ranked[0].score == ranked[1].score
        assert [s.index for s in ranked] == [0, 1]

    def test_explicit_choice(self):
        tracks = [
            make_track(0, "Melody", scale_pitches(60)),
            make_track(1, "Piano", scale_pitches(20)),
        ]
        selection = TrackSelector().select(tracks, choice=2)
        assert selection.selected.index == 1

    @pytest.mark.parametrize("choice", [0, 3, -1])
    def test_out_of_range_choice_falls_back_to_best(self, choice):
        tracks = [
            make_track(0, "Piano", scale_pitches(20)),
            make_track(1, "Melody", scale_pitches(60)),
        ]
        selection = TrackSelector().select(tracks, choice=choice)
        assert selection.selected.index == 1
