"""Command-line interface for windkeys.

Provides commands for:
- convert: Convert a MIDI file to a playable song JSON
- tracks: Rank the tracks of a MIDI file by melody score
- mapping: Show the key-to-note mapping
- info: Show a converted song
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

app = typer.Typer(
    name="windkeys",
    help="MIDI to 36-key keyboard song converter",
    rich_markup_mode="markdown",
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def convert(
    input_file: Path = typer.Argument(..., help="Input MIDI file"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output song JSON (default: <input>.json)"
    ),
    track: Optional[int] = typer.Option(
        None, "--track", "-t", help="Track rank to use, as listed by `tracks` (default: 1)"
    ),
    quantize_ms: float = typer.Option(
        50.0, "--quantize", "-q", help="Quantization grid in ms (0 = off)"
    ),
    max_keys: int = typer.Option(
        2, "--max-keys", "-k", help="Maximum simultaneous keys per chord"
    ),
    base_octave: int = typer.Option(4, "--base-octave", help="Octave of the lowest key row"),
    min_gap_ms: float = typer.Option(
        100.0, "--min-gap", help="Minimum gap between chords in ms"
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Output results as JSON (for scripting)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
):
    """Convert a MIDI file to a playable song.

    **Examples:**

        windkeys convert twinkle.mid

        windkeys convert song.mid -o songs/song.json --track 2 --max-keys 3
    """
    from .converter import SongConverter
    from .core import ConfigurationError, ConverterConfig, MalformedSourceError
    from .input import MidiLoader

    _setup_logging(verbose)

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    if output is None:
        output = input_file.with_suffix(".json")

    try:
        converter = SongConverter(
            ConverterConfig(
                base_octave=base_octave,
                max_simultaneous_keys=max_keys,
                quantization_grid=quantize_ms / 1000.0,
                min_note_gap=min_gap_ms / 1000.0,
            )
        )
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not json_output:
        console.print(f"[blue]Loading MIDI:[/blue] {input_file}")
    try:
        source = MidiLoader().load(input_file)
    except MalformedSourceError as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("  The source file may be damaged. Try a different file.")
        raise typer.Exit(1)

    song, stats = converter.convert(source, track_choice=track, return_stats=True)
    song.save(output)

    if json_output:
        console.print_json(
            data={
                "input": str(input_file),
                "output": str(output),
                "title": song.title,
                "bpm": song.bpm,
                "notes_count": len(song.notes),
                "duration": song.duration,
                "track": stats.selected_track,
                "transpose": stats.transpose_shift,
                "in_range_ratio": stats.in_range_ratio,
                "speed_scale": stats.speed_scale,
            }
        )
        return

    if stats.selected_track is not None:
        console.print(f"  Using track {stats.selected_track}: {stats.track_name}")
        console.print(
            f"  Transpose: {stats.transpose_shift:+d} semitones "
            f"({stats.in_range_notes}/{stats.source_notes} notes in range)"
        )
        if stats.speed_scale != 1.0:
            console.print(f"  Slowed down {stats.speed_scale:.2f}x to keep chords apart")
    else:
        console.print("[yellow]Warning: No notes found in MIDI file.[/yellow]")

    console.print(f"\n[green]Converted:[/green] {song.title}")
    console.print(f"  Notes: {len(song.notes)}")
    console.print(f"  Duration: {song.duration:.1f}s")
    console.print(f"  BPM: {song.bpm}")
    console.print(f"  Saved to: {output}")


@app.command()
def tracks(
    input_file: Path = typer.Argument(..., help="Input MIDI file"),
):
    """Rank the tracks of a MIDI file by how melody-like they are."""
    from .core import MalformedSourceError
    from .inference import TrackSelector
    from .input import MidiLoader

    if not input_file.exists():
        console.print(f"[red]Error: File not found: {input_file}[/red]")
        raise typer.Exit(1)

    try:
        source = MidiLoader().load(input_file)
    except MalformedSourceError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    ranked = TrackSelector().rank(source.tracks_with_notes)
    if not ranked:
        console.print("[yellow]No tracks with notes.[/yellow]")
        return

    table = Table(title=f"Tracks in {input_file.name}")
    table.add_column("Rank", style="cyan")
    table.add_column("Track", style="green")
    table.add_column("Name")
    table.add_column("Notes", style="yellow")
    table.add_column("Score", style="magenta")

    for rank, entry in enumerate(ranked, start=1):
        table.add_row(
            str(rank),
            str(entry.index),
            entry.name,
            str(entry.note_count),
            f"{entry.score:.0f}",
        )

    console.print(table)


@app.command()
def mapping(
    base_octave: int = typer.Option(4, "--base-octave", help="Octave of the lowest key row"),
):
    """Show the key-to-note mapping."""
    from .core import ConfigurationError, ConverterConfig
    from .mapping import KeyMap

    try:
        ConverterConfig(base_octave=base_octave).validate()
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    keymap = KeyMap(base_octave)
    console.print(keymap.display_table(), highlight=False)

    aliases = ", ".join(f"{alias}={canonical}" for alias, canonical in keymap.aliases.items())
    console.print(f"\n  Aliases: {aliases}", highlight=False)


@app.command()
def info(
    song_file: Path = typer.Argument(..., help="Converted song JSON"),
    limit: int = typer.Option(20, "--limit", "-n", help="Number of chords to preview"),
):
    """Show information about a converted song."""
    from .core import SongFormatError
    from .output import Song

    if not song_file.exists():
        console.print(f"[red]Error: File not found: {song_file}[/red]")
        raise typer.Exit(1)

    try:
        song = Song.load(song_file)
    except SongFormatError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"\n[bold]Song Info:[/bold] {song.title}")
    console.print(f"  Chords: {len(song.notes)}")
    console.print(f"  Key presses: {song.key_presses}")
    console.print(f"  Duration: {song.duration:.1f}s")
    console.print(f"  BPM: {song.bpm}")

    if song.notes and limit > 0:
        _show_chords_table(song.notes[:limit])


def _show_chords_table(chords):
    """Display chords in a table."""
    table = Table(title="Chords")
    table.add_column("Time (s)", style="green")
    table.add_column("Keys", style="cyan")
    table.add_column("Duration (ms)", style="yellow")

    for chord in chords:
        table.add_row(
            f"{chord.start:.2f}",
            " + ".join(chord.key_strings),
            f"{chord.duration * 1000:.0f}",
        )

    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
