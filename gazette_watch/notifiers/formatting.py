"""
Shared notification formatting helpers.

Email bodies are rendered from jinja2 templates shipped with the package;
chat messages are short plain text.
"""

import jinja2

from .base import Alert

_env = jinja2.Environment(
    loader=jinja2.PackageLoader("gazette_watch", "templates"),
    autoescape=jinja2.select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def format_subject(alert: Alert) -> str:
    """Return the email subject line for an alert."""
    hits = ", ".join(alert.hits)
    if alert.kind == "group":
        edition = f" {alert.edition_label}" if alert.edition_label else ""
        return f"[{alert.group_name}] {alert.source}{edition}: {hits}"
    if alert.kind == "found":
        return f"{alert.source}: encontrei {hits} 🎯"
    if alert.kind == "empty":
        return f"{alert.source}: nenhum termo encontrado hoje"
    raise ValueError(f"Unsupported alert kind: {alert.kind}")


def format_html(alert: Alert) -> str:
    """Render the HTML email body for an alert."""
    template = _env.get_template(f"{alert.kind}.html")
    return template.render(**alert.parameters)


def format_chat(alert: Alert) -> str:
    """Return the chat message text for an alert."""
    if alert.kind == "empty":
        return f"{alert.source} ⭕ nada hoje\n{alert.url}"

    prefix = f"[{alert.group_name}] " if alert.kind == "group" else ""
    return f"{prefix}{alert.source} ✅ {', '.join(alert.hits)}\n{alert.url}"
