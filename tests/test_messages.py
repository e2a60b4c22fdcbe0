from datetime import datetime, timedelta
from unittest import mock

import pytest
import requests

from luna import messages, settings
from luna.messages import (
    FALLBACKS, Message, MessageScheduler, MessageUnavailable, OllamaProvider,
    PromptCategory, Source, fallback_for, prompt_category, prompt_for, should_refresh,
)

NOW = datetime(2026, 10, 16, 9, 7, 30)


@pytest.mark.parametrize("delta, expected", [
    (timedelta(0), False),
    (timedelta(seconds=299), False),
    (timedelta(seconds=299, microseconds=999999), False),
    (timedelta(seconds=300), True),
    (timedelta(hours=3), True),
])
def test_should_refresh(delta, expected):
    assert should_refresh(NOW, NOW - delta) is expected


def test_should_refresh_from_sentinel():
    assert should_refresh(NOW, datetime.min)


@pytest.mark.parametrize("minute, expected", [
    (0, PromptCategory.STATUS),
    (14, PromptCategory.STATUS),
    (15, PromptCategory.GREETING),
    (29, PromptCategory.GREETING),
    (30, PromptCategory.MOOD),
    (44, PromptCategory.MOOD),
    (45, PromptCategory.FACT),
    (59, PromptCategory.FACT),
])
def test_prompt_category(minute, expected):
    for hour in (0, 13, 23):
        assert prompt_category(NOW.replace(hour=hour, minute=minute)) is expected


@pytest.mark.parametrize("hour, part", [
    (0, "morning"), (11, "morning"), (12, "afternoon"), (17, "afternoon"), (18, "evening"), (23, "evening"),
])
def test_greeting_prompt_follows_time_of_day(hour, part):
    prompt = prompt_for(PromptCategory.GREETING, NOW.replace(hour=hour))
    assert f"good {part} greeting" in prompt


def test_prompts_are_distinct():
    prompts = {prompt_for(category, NOW) for category in PromptCategory}
    assert len(prompts) == 4
    assert all("LUNA" in p for p in prompts)


@pytest.mark.parametrize("minute", range(0, 60, 7))
def test_fallback_for(minute):
    assert fallback_for(NOW.replace(minute=minute)) == FALLBACKS[minute % len(FALLBACKS)]


class FakeProvider:
    def __init__(self, *replies):
        self.replies = list(replies)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def test_scheduler_starts_with_sentinel():
    scheduler = MessageScheduler(FakeProvider())
    assert scheduler.text == settings.INITIAL_MESSAGE
    assert scheduler.message.degraded


def test_scheduler_refreshes_immediately_then_every_five_minutes():
    provider = FakeProvider("Hello from LUNA.", "Second thought.")
    scheduler = MessageScheduler(provider)

    assert scheduler.tick(NOW) == Message("Hello from LUNA.", Source.PROVIDER)
    assert scheduler.tick(NOW + timedelta(minutes=4, seconds=59)).text == "Hello from LUNA."
    assert len(provider.prompts) == 1

    assert scheduler.tick(NOW + timedelta(minutes=5)).text == "Second thought."
    assert scheduler.last_refreshed_at == NOW + timedelta(minutes=5)
    assert len(provider.prompts) == 2


def test_scheduler_locks_in_category_at_refresh_time():
    provider = FakeProvider("a", "b")
    scheduler = MessageScheduler(provider)
    scheduler.tick(NOW.replace(minute=12))
    assert scheduler.category is PromptCategory.STATUS
    scheduler.tick(NOW.replace(minute=17))
    assert scheduler.category is PromptCategory.GREETING
    assert provider.prompts[1] == prompt_for(PromptCategory.GREETING, NOW)


@pytest.mark.parametrize("error", [
    MessageUnavailable("connection refused"),
    RuntimeError("boom"),
])
def test_scheduler_falls_back_on_provider_failure(error):
    scheduler = MessageScheduler(FakeProvider(error))
    now = NOW.replace(minute=42)
    message = scheduler.tick(now)
    assert message == Message(FALLBACKS[42 % len(FALLBACKS)], Source.FALLBACK)
    assert message.degraded
    assert scheduler.last_refreshed_at == now


def test_scheduler_recovers_after_fallback():
    scheduler = MessageScheduler(FakeProvider(MessageUnavailable("down"), "Back online."))
    scheduler.tick(NOW)
    assert scheduler.tick(NOW + timedelta(minutes=5)) == Message("Back online.", Source.PROVIDER)


# -------------------------------
# Ollama client
# -------------------------------
def make_provider(json_data=None, status_error=None, post_error=None):
    session = mock.Mock(spec=requests.Session)
    if post_error:
        session.post.side_effect = post_error
    else:
        response = session.post.return_value
        response.raise_for_status.side_effect = status_error
        if isinstance(json_data, Exception):
            response.json.side_effect = json_data
        else:
            response.json.return_value = json_data
    return OllamaProvider(session=session), session


def test_provider_request_body():
    provider, session = make_provider({"response": "Hi there."})
    assert provider("say hi") == "Hi there."
    session.post.assert_called_once_with(
        settings.OLLAMA_URL,
        json={
            "model": settings.OLLAMA_MODEL,
            "prompt": "say hi",
            "stream": False,
            "options": {"temperature": 0.9, "num_predict": 50},
        },
        timeout=30,
    )


def test_provider_collapses_whitespace():
    provider, _ = make_provider({"response": "  All good.\n\nStill here.  "})
    assert provider("x") == "All good. Still here."


@pytest.mark.parametrize("kwargs", [
    {"post_error": requests.Timeout("timed out")},
    {"post_error": requests.ConnectionError("refused")},
    {"json_data": {}, "status_error": requests.HTTPError("500 Server Error")},
    {"json_data": ValueError("Expecting value")},
    {"json_data": {"error": "model not found"}},
    {"json_data": {"response": None}},
    {"json_data": {"response": "   "}},
    {"json_data": ["not", "a", "dict"]},
])
def test_provider_failures(kwargs):
    provider, _ = make_provider(**kwargs)
    with pytest.raises(MessageUnavailable):
        provider("x")


def test_provider_close():
    provider, session = make_provider({"response": "ok"})
    provider.close()
    session.close.assert_called_once()


def test_provider_default_session():
    provider = OllamaProvider()
    assert isinstance(provider.session, messages.requests.Session)
    provider.close()
