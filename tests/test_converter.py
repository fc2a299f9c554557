"""End-to-end tests for the conversion pipeline and MIDI loading."""

import pretty_midi
import pytest

from windkeys import SongConverter
from windkeys.core import (
    ConfigurationError,
    ConverterConfig,
    MalformedSourceError,
    PERCUSSION_CHANNEL,
    SourceSong,
    TrackData,
)
from windkeys.input import MidiLoader
from windkeys.output import Song


def note(pitch, start, length=0.5, track="Melody", channel=0):
    return {"pitch": pitch, "channel": channel, "start": start, "length": length, "track_name": track}


def source_from(notes, title="Test Song", bpm=120):
    return SourceSong.from_note_list(title, bpm, notes)


def write_midi(path, tempo=100.0):
    """Write a two-track MIDI file: a scale melody and a drum loop."""
    midi = pretty_midi.PrettyMIDI(initial_tempo=tempo)

    melody = pretty_midi.Instrument(program=0, name="Melody")
    for i, pitch in enumerate([60, 62, 64, 65, 67, 69, 71, 72] * 4):
        melody.notes.append(pretty_midi.Note(velocity=90, pitch=pitch, start=i * 0.5, end=i * 0.5 + 0.4))

    drums = pretty_midi.Instrument(program=0, is_drum=True, name="Drums")
    for i in range(32):
        drums.notes.append(pretty_midi.Note(velocity=100, pitch=36 + (i % 2) * 2, start=i * 0.5, end=i * 0.5 + 0.1))

    midi.instruments.extend([melody, drums])
    midi.write(str(path))
    return path


class TestSourceSong:
    """Tests for building tracks from the flat note list."""

    def test_groups_by_track_name(self):
        source = source_from([
            note(60, 0.0, track="Lead"),
            note(36, 0.0, track="Drums", channel=PERCUSSION_CHANNEL),
            note(62, 0.5, track="Lead"),
        ])
        assert [t.name for t in source.tracks] == ["Lead", "Drums"]
        assert [t.index for t in source.tracks] == [0, 1]
        assert source.tracks[0].note_count == 2
        assert source.tracks[1].notes[0].is_percussion
        assert source.tracks[0].notes[1].end == pytest.approx(1.0)

    def test_tracks_with_notes(self):
        source = source_from([note(60, 0.0, track="Lead")])
        source.tracks.append(TrackData(index=1, name="Conductor"))
        assert [t.name for t in source.tracks_with_notes] == ["Lead"]


class TestConverterConfig:
    """Tests for eager configuration checks."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_simultaneous_keys": 0},
            {"quantization_grid": -0.05},
            {"min_note_gap": -1.0},
            {"merge_tolerance": -0.01},
            {"base_octave": 7},
            {"base_octave": -2},
            {"range_min": 90, "range_max": 60},
            {"range_min": -1},
            {"range_max": 128},
            {"quantization_grid": float("nan")},
            {"quantization_grid": float("inf")},
            {"min_note_gap": float("nan")},
            {"min_note_gap": float("inf")},
            {"merge_tolerance": float("nan")},
            {"merge_tolerance": float("inf")},
        ],
    )
    def test_invalid_config_rejected(self, kwargs):
        with pytest.raises(ConfigurationError):
            SongConverter(ConverterConfig(**kwargs))

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            ConverterConfig(max_simultaneous_keys=0).validate()

    def test_defaults_valid(self):
        converter = SongConverter()
        assert converter.config.max_simultaneous_keys == 2
        assert converter.config.quantization_grid == 0.05
        assert converter.keymap.lowest == 60


class TestSongConverter:
    """Tests for full conversions."""

    def test_ascending_naturals(self):
        pitches = [60, 62, 64, 65, 67, 69, 71, 72]
        source = source_from([note(p, float(i)) for i, p in enumerate(pitches)])

        song, stats = SongConverter().convert(source, return_stats=True)

        assert song.title == "Test Song"
        assert song.bpm == 120
        assert len(song.notes) == 8
        assert [c.key_strings for c in song.notes] == [(k,) for k in "ZXCVBNMA"]
        assert [c.start for c in song.notes] == [float(i) for i in range(8)]
        assert all(c.duration == pytest.approx(0.5) for c in song.notes)
        assert stats.transpose_shift == 0
        assert stats.speed_scale == 1.0

    def test_big_chord_reduced_to_melody_and_bass(self):
        source = source_from([note(p, 0.0) for p in (60, 64, 67, 72, 76)])
        converter = SongConverter(ConverterConfig(max_simultaneous_keys=2))

        song = converter.convert(source)

        assert len(song.notes) == 1
        pitches = {converter.keymap.pitch_of(k) for k in song.notes[0].keys}
        assert pitches == {76, 60}

    def test_zero_merge_tolerance_still_limits_chords(self):
        source = source_from([note(p, 0.0) for p in (60, 64, 67, 72, 76)])
        converter = SongConverter(ConverterConfig(merge_tolerance=0.0))

        song = converter.convert(source)

        assert len(song.notes) == 1
        assert {converter.keymap.pitch_of(k) for k in song.notes[0].keys} == {76, 60}

    def test_low_melody_transposed(self):
        source = source_from([note(p, i * 0.5) for i, p in enumerate([36, 38, 40, 41, 43, 45, 47])])
        song, stats = SongConverter().convert(source, return_stats=True)
        assert stats.transpose_shift == 24
        assert stats.in_range_ratio == 1.0
        assert [c.key_strings[0] for c in song.notes] == list("ZXCVBNM")

    def test_chromatic_notes_use_modifiers(self):
        source = source_from([note(61, 0.0), note(63, 1.0), note(66, 2.0), note(60, 3.0), note(84, 4.0)])
        song = SongConverter().convert(source)
        assert [c.key_strings for c in song.notes] == [
            ("Shift+Z",), ("Ctrl+C",), ("Shift+V",), ("Z",), ("Q",),
        ]

    def test_fast_passage_slowed_down(self):
        starts = [0.0, 0.05, 0.1, 0.15, 0.2]
        source = source_from([note(60 + 2 * i, s, length=0.05) for i, s in enumerate(starts)])
        config = ConverterConfig(quantization_grid=0)

        song, stats = SongConverter(config).convert(source, return_stats=True)

        assert stats.speed_scale == pytest.approx(2.0)
        gaps = [b.start - a.start for a, b in zip(song.notes, song.notes[1:])]
        assert min(gaps) >= 0.1 - 1e-9

    def test_short_notes_get_minimum_duration(self):
        source = source_from([note(60, 0.0, length=0.0), note(62, 1.0, length=0.001)])
        song = SongConverter(ConverterConfig(quantization_grid=0)).convert(source)
        assert all(c.duration == pytest.approx(0.05) for c in song.notes)

    def test_output_invariants(self):
        notes = []
        for i in range(200):
            pitch = 30 + (i * 7) % 70
            notes.append(note(pitch, (i // 3) * 0.07 + (i % 3) * 0.003, length=0.02 * (i % 5)))
        converter = SongConverter(ConverterConfig(max_simultaneous_keys=3))
        song = converter.convert(source_from(notes))

        assert song.notes
        starts = [c.start for c in song.notes]
        assert starts == sorted(starts)
        for chord in song.notes:
            assert 1 <= len(chord.keys) <= 3
            assert len(set(chord.keys)) == len(chord.keys)
            assert chord.duration > 0
            assert all(converter.keymap.pitch_of(k) is not None for k in chord.keys)

    def test_empty_source(self):
        source = SourceSong(title="Empty", bpm=90)
        song, stats = SongConverter().convert(source, return_stats=True)
        assert song == Song(title="Empty", bpm=90)
        assert stats.selected_track is None

    def test_melody_track_chosen_over_drums(self):
        notes = [note(36, i * 0.5, track="Drums", channel=PERCUSSION_CHANNEL) for i in range(40)]
        notes += [note(60 + (i % 8), i * 0.5, track="Melody") for i in range(40)]
        song, stats = SongConverter().convert(source_from(notes), return_stats=True)
        assert stats.track_name == "Melody"
        assert stats.selected_track == 1

    def test_track_choice(self):
        notes = [note(36, i * 0.5, track="Drums", channel=PERCUSSION_CHANNEL) for i in range(40)]
        notes += [note(60 + (i % 8), i * 0.5, track="Melody") for i in range(40)]
        _, stats = SongConverter().convert(source_from(notes), track_choice=2, return_stats=True)
        assert stats.track_name == "Drums"

    def test_deterministic(self):
        notes = [note(40 + (i * 5) % 50, i * 0.11, length=0.3) for i in range(100)]
        first = SongConverter().convert(source_from(notes))
        second = SongConverter().convert(source_from(notes))
        assert first == second

    def test_saved_song_round_trips(self, tmp_path):
        notes = [note(55 + (i * 3) % 40, i * 0.13, length=0.2) for i in range(60)]
        song = SongConverter().convert(source_from(notes))
        assert Song.load(song.save(tmp_path / "song.json")) == song


class TestMidiLoader:
    """Tests for decoding .mid files with pretty_midi."""

    def test_load_tracks(self, tmp_path):
        path = write_midi(tmp_path / "scale.mid")
        source = MidiLoader().load(path)

        assert source.title == "scale"
        assert source.bpm == 100
        by_name = {t.name: t for t in source.tracks}
        assert set(by_name) == {"Melody", "Drums"}
        assert by_name["Melody"].note_count == 32
        assert all(n.is_percussion for n in by_name["Drums"].notes)
        assert not any(n.is_percussion for n in by_name["Melody"].notes)
        assert by_name["Melody"].notes[1].start == pytest.approx(0.5, abs=0.01)
        assert by_name["Melody"].notes[0].length == pytest.approx(0.4, abs=0.01)

    def test_convert_loaded_file(self, tmp_path):
        source = MidiLoader().load(write_midi(tmp_path / "scale.mid"))
        song, stats = SongConverter().convert(source, return_stats=True)
        assert stats.track_name == "Melody"
        assert len(song.notes) == 32
        assert song.notes[0].key_strings == ("Z",)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            MidiLoader().load(tmp_path / "missing.mid")

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "broken.mid"
        path.write_bytes(b"this is not a midi file")
        with pytest.raises(MalformedSourceError):
            MidiLoader().load(path)

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "song.txt"
        path.write_text("notes")
        with pytest.raises(MalformedSourceError):
            MidiLoader().load(path)
