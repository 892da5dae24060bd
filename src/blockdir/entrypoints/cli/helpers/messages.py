"""Terminal message helpers for the BLOCKDIR CLI.

Status lines go to **stderr** so stdout stays clean for file contents piped
out of ``blockdir files cat``. Each line starts with an emoji marker, or an
ASCII stand-in when stderr cannot encode it.
"""

import click

# emoji, ASCII fallback
CAUTION = ("⚠️", "[!]")  # pragma: no mutate
SUCCESS = ("✅", "[OK]")  # pragma: no mutate
FAILURE = ("❌", "[X]")  # pragma: no mutate


def _supports_character(character: str) -> bool:
    """Return True if `character` can be encoded on stderr."""
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def glyph(marker: tuple[str, str]) -> str:
    """Pick the emoji of `marker` if stderr supports it, else its fallback."""
    emoji, fallback = marker
    return emoji if _supports_character(emoji) else fallback


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to stderr."""
    click.secho(f"{glyph(CAUTION)}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a green, bold success line to stderr."""
    click.secho(f"{glyph(SUCCESS)}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a red, bold error line to stderr."""
    click.secho(f"{glyph(FAILURE)}  {msg}", fg="red", bold=True, err=True)
