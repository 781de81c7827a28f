import logging
from dataclasses import replace
from enum import Enum, auto
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape

from .config import Configuration
from .conversation import ConversationState
from .dispatcher import build_request
from .errors import ConfigurationError, TransportError
from .llm import ImageResponse, OneMinClient, Response, TextResponse
from .output import OutputSink


logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"


class State(Enum):
    AWAIT_INPUT = auto()
    DISPATCH = auto()
    TERMINATED = auto()


def _read_line(prompt: str) -> str:
    return input(prompt)


class Session:
    """
    Drives one invocation from the first prompt to termination.

    Single-shot runs perform exactly one dispatch/execute/render cycle.
    Interactive runs keep reading lines until the user enters an empty line,
    `exit`, or closes the input stream. A failed request only ends the session
    in single-shot mode; interactively the error is reported and the user turn
    stays in the history so the next prompt still has that context.
    """

    def __init__(
        self,
        config: Configuration,
        api_key: str,
        transport: OneMinClient,
        sink: Optional[OutputSink] = None,
        read_line: Callable[[str], str] = _read_line,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ):
        self.config = config
        self.api_key = api_key
        self.transport = transport
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)
        self.sink = sink or OutputSink(self.console)
        self.read_line = read_line
        self.state = ConversationState()
        self._last_ok = True

    def run(self) -> int:
        """Runs the session and returns the process exit code."""
        current = self._start()
        while current is not State.TERMINATED:
            if current is State.AWAIT_INPUT:
                current = self._await_input()
            else:
                current = self._dispatch()
        return 0 if self._last_ok else 1

    def _start(self) -> State:
        if self.config.interactive:
            self.console.print("Starting interactive mode. Type 'exit' to quit.")

        if self.config.prompt:
            if self.config.interactive:
                self.console.print(f"You: {escape(self.config.prompt)}", highlight=False)
            self.state.append_user(self.config.prompt)
            return State.DISPATCH

        if self.config.interactive:
            return State.AWAIT_INPUT
        return State.TERMINATED

    def _await_input(self) -> State:
        try:
            line = self.read_line("You: ").strip()
        except (KeyboardInterrupt, EOFError):
            return State.TERMINATED

        if not line or line.lower() == EXIT_COMMAND:
            return State.TERMINATED

        self.state.append_user(line)
        return State.DISPATCH

    def _next(self) -> State:
        return State.AWAIT_INPUT if self.config.interactive else State.TERMINATED

    def _dispatch(self) -> State:
        try:
            request = build_request(self.config, self.state)
        except ConfigurationError as e:
            self._report(e)
            self._last_ok = False
            return State.TERMINATED

        try:
            response = self.transport.execute(request, self.api_key)
            response = self._save_image(response)
        except TransportError as e:
            self._report(e)
            self._last_ok = False
            return self._next()
        except KeyboardInterrupt:
            self._report("Request interrupted.")
            self._last_ok = False
            return State.TERMINATED

        self._render(response)
        self._last_ok = True
        return self._next()

    def _save_image(self, response: Response) -> Response:
        if isinstance(response, ImageResponse):
            path = self.transport.download_image(response.url, self.config.output)
            return replace(response, path=path)
        return response

    def _render(self, response: Response):
        self.sink.render(response, self.config)
        if isinstance(response, TextResponse):
            self.state.append_assistant(response.content)

    def _report(self, error):
        logger.debug("Turn %d failed", len(self.state), exc_info=True)
        self.error_console.print(f"[bold red]Error:[/] {escape(str(error))}", highlight=False)
