"""Marquee scrolling for messages too long to fit on one line."""
from luna import settings


def needs_scroll(message):
    return len(message) > settings.MAX_CHARS_PER_LINE


def scroll_window(message, offset):
    """The message is looped onto itself so the window wraps around seamlessly."""
    looped = message + " " + message
    start = offset % len(message)
    return looped[start:start + settings.MAX_CHARS_PER_LINE]


def advance(message, offset):
    # period is len(message), not the looped length
    if not needs_scroll(message):
        return 0
    return (offset + settings.SCROLL_STEP) % len(message)


class ScrollEngine:
    def __init__(self):
        self.offset = 0

    def advance(self, message):
        self.offset = advance(message, self.offset)
        return self.offset

    def sync(self, message):
        # a refresh can swap in a shorter message
        if not needs_scroll(message):
            self.offset = 0
        else:
            self.offset %= len(message)
        return self.offset
