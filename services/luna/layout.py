"""Frame layout: status lines on top, LUNA's message underneath.

Widths are counted in characters, not measured pixels. At 8 px DejaVu Sans
Bold roughly 25 characters fit across 128 px, which is good enough.
"""
from typing import NamedTuple

from luna import settings
from luna.scroll import needs_scroll, scroll_window


class DrawText(NamedTuple):
    text: str
    x: int
    y: int


def status_line(snapshot):
    return f"LUNA: CPU: {snapshot.cpu_percent}% RAM: {snapshot.ram_percent}%"


def ip_line(snapshot):
    return f"IP: {snapshot.ip}"


def wrap_lines(message, width=settings.MAX_CHARS_PER_LINE, top=settings.MESSAGE_Y,
               spacing=settings.LINE_SPACING, bottom=settings.MAX_MESSAGE_Y):
    """Greedy word wrap. Words that don't fit above `bottom` are dropped."""
    out = []
    line = ""
    y = top
    for word in message.split(" "):
        candidate = word if not line else f"{line} {word}"
        if len(candidate) > width and line:
            out.append(DrawText(line, 0, y))
            y += spacing
            line = word
            if y > bottom:
                return out
        else:
            line = candidate
    if line:
        out.append(DrawText(line, 0, y))
    return out


def render(snapshot, message, scroll_offset):
    frame = [
        DrawText(status_line(snapshot), 0, settings.STATUS_Y),
        DrawText(ip_line(snapshot), 0, settings.IP_Y),
    ]
    if needs_scroll(message):
        frame.append(DrawText(scroll_window(message, scroll_offset), 0, settings.MESSAGE_Y))
    else:
        frame.extend(wrap_lines(message))
    return tuple(frame)
