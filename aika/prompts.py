"""Prompt templates"""

from aika.config import Config

INPUT_PLACEHOLDER = "{input}"


def render(template: str, body: str) -> str:
    """Substitute the gathered input into a template.

    Templates without the placeholder get the input appended after a blank line.
    """
    if INPUT_PLACEHOLDER in template:
        return template.replace(INPUT_PLACEHOLDER, body)
    if not body:
        return template
    return f"{template}\n\n{body}"


def build_prompt(config: Config, message: str | None, template: str | None, body: str | None) -> str:
    """Combine a direct message, a named template and gathered input into one prompt"""
    parts = []
    if template:
        parts.append(render(config.get_prompt(template).prompt, body or ""))
        body = None
    if message:
        parts.insert(0, message)
    if body:
        parts.append(body)
    return "\n\n".join(parts)
