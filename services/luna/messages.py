"""LUNA message rotation.

A new message is requested from the local Ollama server every few minutes.
What kind of message is asked for depends only on the wall clock: the hour is
split into four quarters, each with its own prompt. When Ollama is down, slow
or returns garbage, a fixed phrase picked by the current minute is shown
instead, so the screen never goes blank and never crashes the loop.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

import requests

from luna import settings

log = logging.getLogger(__name__)

FALLBACKS = [
    "Monitoring systems...",
    "All systems nominal.",
    "Standing by.",
    "Ready to assist.",
]

SUFFIX = "(1 short sentence, max 25 words)."


class PromptCategory(enum.IntEnum):
    STATUS = 0
    GREETING = 1
    MOOD = 2
    FACT = 3


class Source(enum.Enum):
    PROVIDER = "provider"
    FALLBACK = "fallback"
    INITIAL = "initial"


@dataclass(frozen=True)
class Message:
    text: str
    source: Source

    @property
    def degraded(self):
        return self.source is not Source.PROVIDER


class MessageUnavailable(Exception):
    pass


# -------------------------------
# Pure decisions
# -------------------------------
def should_refresh(now, last_refreshed_at):
    return now - last_refreshed_at >= timedelta(seconds=settings.MESSAGE_UPDATE_INTERVAL)


def prompt_category(now):
    return PromptCategory((now.minute // settings.CATEGORY_MINUTES) % len(PromptCategory))


def prompt_for(category, now):
    if category is PromptCategory.STATUS:
        return f"Generate a brief status update from an AI assistant named LUNA {SUFFIX}"
    if category is PromptCategory.GREETING:
        if now.hour < 12:
            part = "morning"
        elif now.hour < 18:
            part = "afternoon"
        else:
            part = "evening"
        return f"Generate a brief good {part} greeting from LUNA {SUFFIX}"
    if category is PromptCategory.MOOD:
        return f"Generate a brief quirky comment about LUNA's mood as an AI {SUFFIX}"
    return f"Share one brief interesting tech fact from LUNA {SUFFIX}"


def fallback_for(now):
    return FALLBACKS[now.minute % len(FALLBACKS)]


# -------------------------------
# Ollama client
# -------------------------------
class OllamaProvider:
    def __init__(self, url=settings.OLLAMA_URL, model=settings.OLLAMA_MODEL,
                 timeout=settings.OLLAMA_TIMEOUT, session=None):
        self.url = url
        self.model = model
        self.timeout = timeout
        self.session = session or requests.Session()

    def __call__(self, prompt):
        body = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": settings.OLLAMA_TEMPERATURE,
                "num_predict": settings.OLLAMA_MAX_TOKENS,
            },
        }
        try:
            r = self.session.post(self.url, json=body, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            raise MessageUnavailable(str(e)) from e

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise MessageUnavailable("reply has no 'response' field")
        # single line, single spaces
        text = " ".join(text.split())
        if not text:
            raise MessageUnavailable("empty response")
        return text

    def close(self):
        self.session.close()


# -------------------------------
# Scheduler
# -------------------------------
class MessageScheduler:
    """Owns the current message and decides when to ask for a new one."""

    def __init__(self, provider):
        self.provider = provider
        self.message = Message(settings.INITIAL_MESSAGE, Source.INITIAL)
        self.last_refreshed_at = datetime.min
        self.category = None

    @property
    def text(self):
        return self.message.text

    def refresh(self, now):
        category = prompt_category(now)
        try:
            message = Message(self.provider(prompt_for(category, now)), Source.PROVIDER)
            log.info(f"New {category.name.lower()} message: {message.text}")
        except Exception as e:
            message = Message(fallback_for(now), Source.FALLBACK)
            log.warning(f"Ollama unavailable ({e}), using fallback: {message.text}")
        self.message = message
        self.category = category
        self.last_refreshed_at = now
        return message

    def tick(self, now):
        if should_refresh(now, self.last_refreshed_at):
            return self.refresh(now)
        return self.message
