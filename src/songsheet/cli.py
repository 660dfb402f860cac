import logging
import re
import sys
from pathlib import Path

import click

from .chordpro import ChordProFormatter
from .converter import convert_chord_sheet
from .document import identifier_for, join_document, split_document, summarize, transpose_document
from .exceptions import ConversionError, DocumentFormatError, UnknownKeyError
from .keys import key_name, require_key
from .layout import render_chords_above, render_lyrics, render_overlay, render_raw
from .parser import parse_song
from .transpose import transpose_song

VIEWS = ("above", "chorded", "lyrics", "raw")


def _slugify(text: str) -> str:
    """Convert a string to a lowercase hyphenated slug suitable for filenames."""
    text = text.lower().replace("♭", "b").replace("#", "-sharp")
    text = re.sub(r"[^\w\s-]", "", text)   # drop punctuation
    text = re.sub(r"[\s_]+", "-", text)     # spaces/underscores → hyphens
    text = re.sub(r"-{2,}", "-", text)      # collapse multiple hyphens
    return text.strip("-")


def _key_callback(ctx: click.Context, param: click.Parameter, value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return require_key(value)
    except UnknownKeyError as exc:
        raise click.BadParameter(str(exc)) from exc


def _read(path: str) -> str:
    # keep \r\n line endings intact
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def _emit(text: str, dest: Path, stdout: bool) -> None:
    if stdout:
        click.echo(text, nl=not text.endswith("\n"))
        return
    dest.write_text(text, encoding="utf-8", newline="")
    click.echo(f"Written to {dest}")


@click.group(context_settings={"help_option_names": ["-h", "--help"], "auto_envvar_prefix": "SONGSHEET"})
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log parser and transposer details.")
def main(verbose: bool) -> None:
    """Read, transpose and convert chord-annotated song sheets.

    \b
    Song files hold "Name: Value" metadata, a line of "=====" and a body of
    lyric lines with inline {chord} markers and [Section] headers.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("-k", "--key", "to_key", default=None, callback=_key_callback,
              help="Show the song in this key (e.g. A, Bb, F#).")
@click.option("--view", type=click.Choice(VIEWS), default="above", show_default=True,
              help="How to lay out chords and lyrics.")
@click.option("--wrap", default="[{chord}]", show_default=True,
              help="Template for each chord in the chorded view.")
def show(path: str, to_key: int | None, view: str, wrap: str) -> None:
    """Print a song, optionally transposed."""
    song = parse_song(_read(path))
    if to_key is not None:
        if song.main_key is None:
            click.echo("Warning: song has no recognised key; chords left as written", err=True)
        song = transpose_song(song, to_key)

    if song.title:
        click.echo(song.title)
    if song.author:
        click.echo(song.author)
    if song.main_key is not None:
        click.echo(f"Key: {key_name(song.main_key)}")

    for section in song.sections:
        click.echo("")
        if section.title:
            click.echo(f"[{section.title}]")
        for line in section.lines:
            if view == "above":
                chord_row, lyric_row = render_chords_above(line)
                if chord_row:
                    click.echo(chord_row)
                if lyric_row:
                    click.echo(lyric_row)
            elif view == "chorded":
                click.echo(render_overlay(line, lambda chord: wrap.format(chord=chord)))
            elif view == "lyrics":
                click.echo(render_lyrics(line))
            else:
                click.echo(render_raw(line))


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("-t", "--to", "to_key", required=True, callback=_key_callback,
              help="Destination key.")
@click.option("-f", "--from", "from_key", default=None, callback=_key_callback,
              help="Origin key (default: the song's Key metadata).")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <name>-in-<key>.txt)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
def transpose(path: str, to_key: int, from_key: int | None, output_path: str | None, stdout: bool) -> None:
    """Rewrite a song file in another key."""
    text = _read(path)
    if from_key is None and parse_song(text).main_key is None:
        click.echo("Error: song has no recognised key; pass --from", err=True)
        sys.exit(1)

    result = transpose_document(text, to_key, from_key)
    source = Path(path)
    dest = (
        Path(output_path) if output_path
        else source.with_name(f"{source.stem}-in-{_slugify(key_name(to_key))}{source.suffix}")
    )
    _emit(result, dest, stdout)


@main.command(name="list")
@click.argument("directory", type=click.Path(exists=True, file_okay=False), default=".")
def list_songs(directory: str) -> None:
    """List the songs (*.txt files) in DIRECTORY."""
    for path in sorted(Path(directory).glob("*.txt")):
        summary = summarize(parse_song(_read(str(path))), identifier_for(path.name))
        click.echo("\t".join([
            summary.identifier,
            summary.title,
            summary.author,
            summary.key_name or "-",
        ]))


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: overwrite PATH)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
def convert(path: str, output_path: str | None, stdout: bool) -> None:
    """Turn a chord-over-lyric body into inline {chord} markers."""
    try:
        metadata_text, body_text = split_document(_read(path), strict=True)
        body = convert_chord_sheet(body_text)
    except (DocumentFormatError, ConversionError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    _emit(join_document(metadata_text, body), Path(output_path or path), stdout)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("-k", "--key", "to_key", default=None, callback=_key_callback,
              help="Export in this key.")
@click.option("-o", "--output", "output_path", default=None, metavar="PATH",
              help="Output file path (default: <author>-<title>.cho)")
@click.option("--stdout", is_flag=True, default=False,
              help="Print to stdout instead of writing a file.")
def chordpro(path: str, to_key: int | None, output_path: str | None, stdout: bool) -> None:
    """Export a song to ChordPro format."""
    song = parse_song(_read(path))
    if to_key is not None:
        song = transpose_song(song, to_key)

    text = ChordProFormatter().render(song)
    if output_path:
        dest = Path(output_path)
    else:
        stem = "-".join(s for s in (_slugify(song.author or ""), _slugify(song.title or "")) if s)
        dest = Path(f"{stem or Path(path).stem}.cho")
    _emit(text, dest, stdout)
