"""Interactive read-eval-print loop over a single provider"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console

from aika.exceptions import AikaError
from aika.provider import Provider

logger = logging.getLogger(__name__)

PROMPT = "aika> "
EXIT_WORDS = ("exit", "quit")


@dataclass
class Transcript:
    """Prompt/response pairs of the current session, oldest first"""

    entries: list[tuple[str, str]] = field(default_factory=list)

    def append(self, prompt: str, response: str):
        self.entries.append((prompt, response))

    def clear(self):
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.entries)


class ReplHistory(InMemoryHistory):
    """Line-edit history that stores trimmed, non-blank lines and collapses repeats"""

    def append_string(self, string: str) -> None:
        string = string.strip()
        if not string:
            return
        strings = self.get_strings()
        if strings and strings[-1] == string:
            return
        super().append_string(string)


class Repl:
    def __init__(
        self,
        provider: Provider,
        model: Optional[str] = None,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
        read_line: Optional[Callable[[str], str]] = None,
        debug: bool = False,
    ):
        self.provider = provider
        self.model = model or provider.model
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self.history = ReplHistory()
        self.transcript = Transcript()
        self.debug = debug
        if read_line is None:
            read_line = PromptSession(history=self.history).prompt
        self.read_line = read_line

        self.commands: dict[str, Callable[[], None]] = {
            "/help": self.print_help,
            "/clear": self.clear,
            "/history": self.print_history,
            "/models": self.list_models,
        }

    def run(self):
        self.print_banner()

        while True:
            try:
                line = self.read_line(PROMPT)
            except KeyboardInterrupt:
                self._print("^C")
                continue
            except EOFError:
                self._print("^D")
                break

            if not self.handle_line(line):
                break

    def handle_line(self, line: str) -> bool:
        """Process one line of input; returns False when the session should end"""
        trimmed = line.strip()
        if not trimmed:
            return True

        self.history.append_string(trimmed)

        if trimmed in EXIT_WORDS:
            self._print("Goodbye!")
            return False

        command = self.commands.get(trimmed)
        if command is not None:
            command()
            return True

        if trimmed.startswith("/"):
            self._print(f"Unknown command: {trimmed}. Type '/help' for available commands.")
            return True

        self.ask(trimmed)
        return True

    def ask(self, prompt: str):
        if self.debug:
            self._print(f"Sending query to {self.provider.name}...")

        try:
            response = self.provider.query(self.model, prompt, streaming=False)
        except AikaError as e:
            logger.debug(f"Query failed: {e!r}")
            self.err_console.print(f"Error: {e}", markup=False, highlight=False, soft_wrap=True)
            return

        self._print(f"\n{response}\n")
        self.transcript.append(prompt, response)

    # ==== commands ====
    def print_banner(self):
        self._print("Aika REPL - Interactive mode")
        self._print(f"Provider: {self.provider.name}")
        self._print(f"Model: {self.model}")
        self._print("Type 'exit', 'quit', or press Ctrl+D to exit")
        self._print("Type '/help' for available commands")
        self._print("")

    def print_help(self):
        self._print("Available commands:")
        self._print("  /help     - Show this help message")
        self._print("  /clear    - Clear conversation history")
        self._print("  /history  - Show conversation history")
        self._print("  /models   - List available models")
        self._print("  exit/quit - Exit the REPL")
        self._print("")
        self._print("Just type your message to interact with the AI.")

    def clear(self):
        self.transcript.clear()
        self._print("Conversation history cleared.")

    def print_history(self):
        if not self.transcript:
            self._print("No conversation history.")
            return

        self._print("\nConversation History:")
        self._print("━" * 20)
        for i, (prompt, response) in enumerate(self.transcript, start=1):
            self._print(f"\n[{i}] User: {prompt}")
            self._print(f"Assistant: {response}")
        self._print("")

    def list_models(self):
        try:
            self.provider.list_models(self.console)
        except AikaError as e:
            self.err_console.print(f"Error: {e}", markup=False, highlight=False, soft_wrap=True)

    def _print(self, text: str):
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)


def run_repl(provider: Provider, model: Optional[str] = None, debug: bool = False):
    """Start an interactive session with the given provider"""
    Repl(provider, model=model, debug=debug).run()
