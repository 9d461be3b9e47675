"""Terminal message helpers for the brick-orm CLI.

Each helper prints one styled line to **stderr**, so stdout stays free for
Alembic output and ``--sql`` scripts. Glyphs fall back to ASCII when the
stream cannot encode emoji.
"""

import click

_GLYPHS = {
    "warn": ("⚠️", "[!]"),
    "success": ("✅", "[OK]"),
    "error": ("❌", "[X]"),
}


def _supports_character(character: str) -> bool:
    """Return True if *character* can be encoded on stderr."""
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def glyph(kind: str) -> str:
    """Return the emoji for *kind* ("warn", "success", "error") or its ASCII fallback."""
    emoji, fallback = _GLYPHS[kind]
    return emoji if _supports_character(emoji) else fallback


def _emit(kind: str, msg: str, color: str) -> None:
    click.secho(f"{glyph(kind)}  {msg}", fg=color, bold=True, err=True)


def warn(msg: str) -> None:
    """Emit a yellow warning line, e.g. ``⚠️  This will modify your database.``"""
    _emit("warn", msg, "yellow")


def success(msg: str) -> None:
    """Emit a green success line, e.g. ``✅  Upgrade complete!``"""
    _emit("success", msg, "green")


def error(msg: str) -> None:
    """Emit a red error line, e.g. ``❌  Cannot connect to database``"""
    _emit("error", msg, "red")
