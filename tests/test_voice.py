import subprocess
import unittest
from unittest.mock import patch

from ai_cli.ai import voice
from ai_cli.ai.errors import VoiceSynthesisError


class TestSpeak(unittest.TestCase):
    """Tests for launching the system speech synthesizer."""

    @patch("subprocess.Popen")
    @patch("sys.platform", "darwin")
    def test_uses_say_on_macos(self, mock_popen):
        voice.speak("Bonjour")

        mock_popen.assert_called_once_with(
            ["say", "Bonjour"], stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL
        )

    @patch("subprocess.Popen")
    @patch("shutil.which", side_effect=lambda name: "/usr/bin/espeak" if name == "espeak" else None)
    @patch("sys.platform", "linux")
    def test_uses_first_available_fallback(self, mock_which, mock_popen):
        voice.speak("Hello")

        args = mock_popen.call_args.args[0]
        self.assertEqual(args, ["espeak", "Hello"])

    @patch("subprocess.Popen")
    def test_does_not_wait_for_playback(self, mock_popen):
        """The process handle is never waited on."""
        with patch("sys.platform", "darwin"):
            voice.speak("Hello")
        mock_popen.return_value.wait.assert_not_called()
        mock_popen.return_value.communicate.assert_not_called()

    @patch("subprocess.Popen")
    @patch("shutil.which", return_value=None)
    @patch("sys.platform", "linux")
    def test_missing_synthesizer_raises(self, mock_which, mock_popen):
        with self.assertRaises(VoiceSynthesisError):
            voice.speak("Hello")
        mock_popen.assert_not_called()

    @patch("subprocess.Popen", side_effect=OSError("permission denied"))
    @patch("sys.platform", "darwin")
    def test_launch_failure_raises(self, mock_popen):
        with self.assertRaises(VoiceSynthesisError) as cm:
            voice.speak("Hello")
        self.assertIn("say", str(cm.exception))

    @patch("subprocess.Popen")
    def test_empty_text_is_ignored(self, mock_popen):
        voice.speak("")
        mock_popen.assert_not_called()
