"""Message text and inline keyboard rendering."""

from __future__ import annotations

import string

MAX_OPTIONS = len(string.ascii_uppercase)

CONFIRM_YES_DATA = "y"
CONFIRM_NO_DATA = "n"

CONFIRM_KEYBOARD = {
    "inline_keyboard": [
        [
            {"text": "✅ Yes", "callback_data": CONFIRM_YES_DATA},
            {"text": "❌ No", "callback_data": CONFIRM_NO_DATA},
        ]
    ]
}

# Passing an empty keyboard to editMessageText drops the buttons.
REMOVE_KEYBOARD: dict = {"inline_keyboard": []}


def option_labels(count: int) -> list[str]:
    """Return A, B, C... for ``count`` options (1-26)."""
    if count < 1 or count > MAX_OPTIONS:
        raise ValueError(f"choice needs between 1 and {MAX_OPTIONS} options, got {count}")
    return list(string.ascii_uppercase[:count])


def format_options(options: list[str] | tuple[str, ...], *, recommended: int | None = None) -> str:
    lines: list[str] = []
    for idx, (label, text) in enumerate(zip(option_labels(len(options)), options)):
        line = f"{label}) {text}"
        if idx == recommended:
            line += " ⭐"
        lines.append(line)
    return "\n".join(lines)


def format_choice_text(
    prompt: str,
    options: list[str] | tuple[str, ...],
    *,
    recommended: int | None = None,
) -> str:
    return f"{prompt}\n\n{format_options(options, recommended=recommended)}"


def choice_keyboard(count: int, columns: int = 4) -> dict:
    """Lay out one label-only button per option, ``columns`` per row."""
    if columns < 1:
        raise ValueError(f"columns must be at least 1, got {columns}")
    labels = option_labels(count)
    rows = [
        [{"text": label, "callback_data": label} for label in labels[i : i + columns]]
        for i in range(0, len(labels), columns)
    ]
    return {"inline_keyboard": rows}


def format_resolved(prompt: str, display: str) -> str:
    return f"{prompt}\n\n✅ {display}"
