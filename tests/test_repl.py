"""Tests for the interactive session"""

import io

import pytest
from rich.console import Console

from aika.exceptions import ApiError, NetworkError
from aika.provider import create_provider
from aika.repl import Repl, ReplHistory, Transcript


class StubProvider:
    name = "stub"
    model = "stub-model"

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.queries = []
        self.listed = 0

    def query(self, model, prompt, streaming=False, sink=None):
        self.queries.append((model, prompt, streaming))
        if self.error is not None:
            raise self.error
        return self.replies.pop(0)

    def list_models(self, console=None):
        self.listed += 1
        console.print("Available Stub models:")


def scripted(*lines):
    """A line reader that replays ``lines`` and then signals end of input"""
    pending = list(lines)

    def read_line(prompt):
        if not pending:
            raise EOFError
        line = pending.pop(0)
        if isinstance(line, BaseException):
            raise line
        return line

    return read_line


def make_repl(provider, *lines, model=None):
    out, err = io.StringIO(), io.StringIO()
    repl = Repl(
        provider,
        model=model,
        console=Console(file=out, width=200),
        err_console=Console(file=err, width=200),
        read_line=scripted(*lines),
    )
    return repl, out, err


class TestTranscript:
    def test_append_and_clear(self):
        transcript = Transcript()
        transcript.append("q1", "a1")
        transcript.append("q2", "a2")

        assert list(transcript) == [("q1", "a1"), ("q2", "a2")]
        assert len(transcript) == 2

        transcript.clear()
        assert len(transcript) == 0


class TestReplHistory:
    def test_blank_and_repeated_lines(self):
        history = ReplHistory()
        for line in ["hello", "  ", "", "hello", " hello ", "bye"]:
            history.append_string(line)

        assert list(history.get_strings()) == ["hello", "bye"]


class TestRepl:
    def test_banner_shows_provider_and_model(self):
        repl, out, _ = make_repl(StubProvider())
        repl.run()

        assert "Provider: stub" in out.getvalue()
        assert "Model: stub-model" in out.getvalue()

    def test_model_override(self):
        provider = StubProvider(replies=["ok"])
        repl, _, _ = make_repl(provider, "hi", model="other-model")
        repl.run()

        assert provider.queries == [("other-model", "hi", False)]

    def test_blank_input_is_ignored(self):
        provider = StubProvider()
        repl, _, _ = make_repl(provider, "", "   ")
        repl.run()

        assert provider.queries == []
        assert list(repl.history.get_strings()) == []
        assert len(repl.transcript) == 0

    def test_prompt_is_answered_and_recorded(self):
        provider = StubProvider(replies=["Four."])
        repl, out, _ = make_repl(provider, "  what is 2+2?  ")
        repl.run()

        assert provider.queries == [("stub-model", "what is 2+2?", False)]
        assert "Four." in out.getvalue()
        assert list(repl.transcript) == [("what is 2+2?", "Four.")]
        assert list(repl.history.get_strings()) == ["what is 2+2?"]

    def test_provider_error_does_not_end_session(self):
        provider = StubProvider(error=ApiError("Stub", 500, "boom"))
        repl, out, err = make_repl(provider, "first", "second", "/help")
        repl.run()

        assert len(provider.queries) == 2
        assert err.getvalue().count("Error: Stub API error (500): boom") == 2
        assert "Available commands:" in out.getvalue()
        assert len(repl.transcript) == 0

    @pytest.mark.parametrize("word", ["exit", "quit"])
    def test_exit_words(self, word):
        provider = StubProvider(replies=["never"])
        repl, out, _ = make_repl(provider, word, "not reached")
        repl.run()

        assert "Goodbye!" in out.getvalue()
        assert provider.queries == []

    def test_end_of_input_stops(self):
        repl, out, _ = make_repl(StubProvider())
        repl.run()

        assert out.getvalue().rstrip().endswith("^D")

    def test_interrupt_continues(self):
        provider = StubProvider(replies=["still here"])
        repl, out, _ = make_repl(provider, KeyboardInterrupt(), "hello")
        repl.run()

        assert "^C" in out.getvalue()
        assert provider.queries == [("stub-model", "hello", False)]

    def test_clear_and_history(self):
        provider = StubProvider(replies=["a1", "a2"])
        repl, out, _ = make_repl(provider, "q1", "/history", "/clear", "/history", "q2")
        repl.run()

        text = out.getvalue()
        assert "[1] User: q1" in text
        assert "Assistant: a1" in text
        assert "Conversation history cleared." in text
        assert "No conversation history." in text
        assert list(repl.transcript) == [("q2", "a2")]

    def test_unknown_command_is_not_sent(self):
        provider = StubProvider()
        repl, out, _ = make_repl(provider, "/frobnicate")
        repl.run()

        assert "Unknown command: /frobnicate" in out.getvalue()
        assert provider.queries == []

    def test_models_command(self):
        provider = StubProvider()
        repl, out, _ = make_repl(provider, "/models", "/models")
        repl.run()

        assert provider.listed == 2
        assert "Available Stub models:" in out.getvalue()

    def test_models_failure_does_not_end_session(self, backend, config):
        backend.add("GET", "/v1/models", status=500, text="internal")
        backend.add("POST", "/v1/messages", json_body={"content": [{"type": "text", "text": "pong"}]})
        provider = create_provider("anthropic", config, http=backend.client())
        repl, out, err = make_repl(provider, "/models", "ping")
        repl.run()

        assert "Anthropic API error (500): internal" in err.getvalue()
        assert "pong" in out.getvalue()

    def test_transport_error_is_reported(self):
        provider = StubProvider(error=NetworkError("Stub request failed: timed out"))
        repl, _, err = make_repl(provider, "hello")
        repl.run()

        assert "Error: Stub request failed: timed out" in err.getvalue()
