"""Formatting of finished responses for display"""

import json


def wrap_paragraph(paragraph: str, width: int) -> str:
    """Greedy word wrap; words longer than ``width`` are split across lines"""
    lines = []
    current = ""

    for word in paragraph.split():
        needed = len(word) if not current else len(current) + 1 + len(word)
        if needed <= width:
            current = f"{current} {word}" if current else word
            continue

        if current:
            lines.append(current)
            current = ""

        while len(word) > width:
            lines.append(word[:width])
            word = word[width:]
        current = word

    if current:
        lines.append(current)

    return "\n".join(lines)


def wrap_text(text: str, width: int) -> str:
    """Wrap each blank-line separated paragraph independently"""
    if width <= 0:
        return ""
    return "\n\n".join(wrap_paragraph(p, width) for p in text.split("\n\n"))


def to_json(text: str, provider: str, model: str) -> str:
    return json.dumps({"provider": provider, "model": model, "response": text}, indent=2)


def format_response(
    text: str,
    width: int | None = None,
    as_json: bool = False,
    provider: str = "",
    model: str = "",
) -> str:
    """Apply the requested wrapping to a finished response"""
    if width:
        text = wrap_text(text, width)
    if as_json:
        return to_json(text, provider, model)
    return text
