import unittest
from io import StringIO
from unittest.mock import MagicMock

from rich.console import Console

from ai_cli.ai.config import Configuration
from ai_cli.ai.errors import VoiceSynthesisError
from ai_cli.ai.llm import ImageResponse, TextResponse
from ai_cli.ai.output import OutputSink


class TestOutputSink(unittest.TestCase):
    """Tests for printing and speaking responses."""

    def setUp(self):
        self.stdout = StringIO()
        self.speaker = MagicMock()
        self.sink = OutputSink(Console(file=self.stdout, width=200), speaker=self.speaker)

    def test_text_is_printed_with_model_header(self):
        self.sink.render(TextResponse("Paris"), Configuration(model="gpt-4o"))

        output = self.stdout.getvalue()
        self.assertIn("AI(gpt-4o):", output)
        self.assertIn("Paris", output)
        self.speaker.assert_not_called()

    def test_voice_output_speaks_and_prints(self):
        self.sink.render(TextResponse("Paris"), Configuration(voice_output=True))

        self.assertIn("Paris", self.stdout.getvalue())
        self.speaker.assert_called_once_with("Paris")

    def test_quiet_mode_only_speaks(self):
        """Quiet suppresses printed text but never the voice."""
        config = Configuration(voice_output=True, quiet=True)

        self.sink.render(TextResponse("Paris"), config)

        self.assertEqual(self.stdout.getvalue(), "")
        self.speaker.assert_called_once_with("Paris")

    def test_voice_failure_is_logged_not_raised(self):
        self.speaker.side_effect = VoiceSynthesisError("no synthesizer")

        with self.assertLogs("ai_cli.ai.output", level="WARNING") as logs:
            self.sink.render(TextResponse("Paris"), Configuration(voice_output=True))

        self.assertIn("no synthesizer", logs.output[0])
        self.assertIn("Paris", self.stdout.getvalue())

    def test_image_reference_is_presented(self):
        response = ImageResponse(url="https://cdn.test/cat.png", path="cat.png")

        self.sink.render(response, Configuration(image_generation=True, prompt="cat"))

        output = self.stdout.getvalue()
        self.assertIn("https://cdn.test/cat.png", output)
        self.assertIn("Image saved to cat.png", output)
        self.speaker.assert_not_called()

    def test_image_without_local_file_shows_url_only(self):
        self.sink.render(ImageResponse(url="https://cdn.test/cat.png"), Configuration())
        self.assertNotIn("saved", self.stdout.getvalue())

    def test_unknown_response_type_raises(self):
        with self.assertRaises(TypeError):
            self.sink.render("not a response", Configuration())
