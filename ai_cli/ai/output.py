import logging
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape
from rich.markdown import Markdown

from .config import Configuration
from .errors import VoiceSynthesisError
from .llm import ImageResponse, Response, TextResponse
from .voice import speak


logger = logging.getLogger(__name__)


class OutputSink:
    """Prints responses to the terminal and forwards text to the speech synthesizer."""

    def __init__(
        self,
        console: Optional[Console] = None,
        speaker: Callable[[str], None] = speak,
    ):
        self.console = console or Console()
        self.speaker = speaker

    def render(self, response: Response, config: Configuration):
        if isinstance(response, TextResponse):
            self._render_text(response, config)
        elif isinstance(response, ImageResponse):
            self._render_image(response)
        else:
            raise TypeError(f"Unsupported response type: {type(response).__name__}")

    def _render_text(self, response: TextResponse, config: Configuration):
        # Quiet only silences the terminal, never the voice.
        if not config.quiet:
            self.console.print(f"AI({config.model}):", style="bold cyan")
            self.console.print(Markdown(response.content))

        if config.voice_output:
            try:
                self.speaker(response.content)
            except VoiceSynthesisError as e:
                logger.warning("Voice output failed: %s", e)

    def _render_image(self, response: ImageResponse):
        self.console.print(f"[green]✓ Image generated:[/] {escape(response.url)}", highlight=False)
        if response.path:
            self.console.print(f"Image saved to {escape(response.path)}", highlight=False)
