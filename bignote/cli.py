"""BigNote CLI entry point."""

import logging
import sys
from pathlib import Path

import click

from bignote import __version__
from bignote.compositor import Staff
from bignote.errors import BigNoteError
from bignote.midi_input import NoteTracker, read_note_events
from bignote.pitch_model import MIDI_MAX, MIDI_MIN, Alteration, Pitch, resolve
from bignote.scene_renderers import HtmlSceneRenderer, SceneRenderer, SvgSceneRenderer
from bignote.staff_geometry import DEFAULT_MAX_VISIBLE_LINES, Rect, StaffConfig

DEFAULT_WIDTH = 400
DEFAULT_HEIGHT = 300


def _parse_note(text: str) -> Pitch:
    """Accept either a MIDI number ('66') or a display name ('F#3')."""
    stripped = text.strip()
    try:
        midi_number = int(stripped)
    except ValueError:
        return Pitch.from_name(stripped)
    return Pitch(midi_number)


def _preference(flat: bool) -> Alteration:
    return Alteration.FLAT if flat else Alteration.SHARP


def _get_renderer(output_format: str) -> SceneRenderer:
    if output_format == "html":
        return HtmlSceneRenderer()
    return SvgSceneRenderer()


def _write(content: str, output: str | None) -> None:
    if output is None:
        click.echo(content)
        return
    with open(output, "w", encoding="utf-8") as fh:
        fh.write(content)


def _fail(message: str) -> None:
    click.echo(f"  ERROR: {message}", err=True)
    sys.exit(1)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="bignote")
@click.option("--verbose", "-v", is_flag=True, help="Log diagnostics to stderr.")
def main(verbose: bool) -> None:
    """BigNote — draw a MIDI note on a treble staff."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ── show subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("note")
@click.option("--flat", is_flag=True, help="Spell black keys as flats instead of sharps.")
@click.option(
    "--lines",
    type=int,
    default=DEFAULT_MAX_VISIBLE_LINES,
    show_default=True,
    help="Visible line slots including ledger space (odd, at least 5).",
)
@click.option("--width", type=click.IntRange(1, None), default=DEFAULT_WIDTH, show_default=True)
@click.option("--height", type=click.IntRange(1, None), default=DEFAULT_HEIGHT, show_default=True)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["svg", "html"], case_sensitive=False),
    default="svg",
    show_default=True,
    help="Standalone SVG or a self-contained HTML page.",
)
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file. Prints to stdout when omitted.",
)
def show(
    note: str,
    flat: bool,
    lines: int,
    width: int,
    height: int,
    output_format: str,
    output: str | None,
) -> None:
    """
    Draw a single note on the staff.

    NOTE is a MIDI number (0-127) or a note name such as C3, F#3 or Gb3
    (MIDI 60 is C3).

    \b
    Examples:
      bignote show 60 -o c3.svg
      bignote show 66 --flat --format html -o gb3.html
    """
    try:
        pitch = _parse_note(note)
        config = StaffConfig(max_visible_lines=lines, alteration_preference=_preference(flat))
        staff = Staff(config)
        staff.set_note(pitch)
        commands = staff.render(Rect(0, 0, width, height))
        name = pitch.resolve(config.alteration_preference).display_name
        renderer = _get_renderer(output_format.lower())
        content = renderer.render([commands], width=width, height=height, title=name)
        _write(content, output)
    except BigNoteError as exc:
        _fail(str(exc))
    except OSError as exc:
        _fail(f"Could not write output file — {exc}")

    if output is not None:
        click.echo(f"Wrote {name} → '{output}'")


# ── names subcommand ───────────────────────────────────────────────────────────

@main.command()
@click.option("--flat", is_flag=True, help="Spell black keys as flats instead of sharps.")
@click.option("--low", type=click.IntRange(MIDI_MIN, MIDI_MAX), default=48, show_default=True)
@click.option("--high", type=click.IntRange(MIDI_MIN, MIDI_MAX), default=84, show_default=True)
def names(flat: bool, low: int, high: int) -> None:
    """List note names, staff lines and accidentals for a MIDI range."""
    if low > high:
        _fail(f"--low ({low}) is above --high ({high}).")

    preference = _preference(flat)
    for midi_number in range(low, high + 1):
        resolved = resolve(midi_number, preference)
        click.echo(
            f"{midi_number:4d}  {resolved.display_name:<5}  "
            f"line {resolved.line:5.1f}  {resolved.alteration.value}"
        )


# ── replay subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("midi_file", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option("--flat", is_flag=True, help="Spell black keys as flats instead of sharps.")
@click.option("--width", type=click.IntRange(1, None), default=DEFAULT_WIDTH, show_default=True)
@click.option("--height", type=click.IntRange(1, None), default=DEFAULT_HEIGHT, show_default=True)
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination HTML file. Defaults to <midi-file>.html.",
)
def replay(midi_file: str, flat: bool, width: int, height: int, output: str | None) -> None:
    """
    Render one staff frame per note change of a MIDI file into an HTML page.

    MIDI_FILE is the path to an existing .mid file.
    """
    midi_path = Path(midi_file)
    resolved_output = output if output is not None else str(midi_path.with_suffix(".html"))
    config = StaffConfig(alteration_preference=_preference(flat))

    click.echo(f"bignote v{__version__}")
    click.echo(f"  MIDI   : {midi_file}")
    click.echo(f"  Output : {resolved_output}")
    click.echo()

    click.echo("[1/3] Reading note events with music21...")
    try:
        events = read_note_events(midi_file)
    except ValueError as exc:
        _fail(str(exc))

    click.echo("[2/3] Laying out staff frames...")
    staff = Staff(config)
    tracker = NoteTracker()
    container = Rect(0, 0, width, height)
    frames = []
    captions = []
    for time, event in events:
        if not tracker.feed(staff, event) or staff.note is None:
            continue
        frames.append(staff.render(container))
        name = staff.note.resolve(config.alteration_preference).display_name
        captions.append(f"{time:7.2f}  {name}")

    if not frames:
        _fail("No notes found in the MIDI file.")

    click.echo(f"[3/3] Writing {len(frames)} frame(s) → '{resolved_output}'...")
    content = HtmlSceneRenderer().render(
        frames,
        width=width,
        height=height,
        title=midi_path.stem.replace("_", " "),
        captions=captions,
    )
    try:
        _write(content, resolved_output)
    except OSError as exc:
        _fail(f"Could not write output file — {exc}")

    click.echo()
    click.echo(f"Done!  Open '{resolved_output}' in any browser.")
