import logging
import shutil
import subprocess
import sys
from typing import List, Optional

from .errors import VoiceSynthesisError


logger = logging.getLogger(__name__)

# Tried in order on platforms without `say`.
FALLBACK_COMMANDS = ["espeak-ng", "espeak", "spd-say"]


def _voice_command() -> Optional[List[str]]:
    if sys.platform == "darwin":
        return ["say"]
    for name in FALLBACK_COMMANDS:
        if shutil.which(name):
            return [name]
    return None


def speak(text: str):
    """
    Reads `text` aloud with the system's speech synthesizer.

    The command is started and left running; playback may still be in progress
    (or cut short) when the process exits.
    """
    if not text:
        return

    command = _voice_command()
    if command is None:
        raise VoiceSynthesisError(
            "No speech synthesizer found. Install one of: say, " + ", ".join(FALLBACK_COMMANDS)
        )

    try:
        subprocess.Popen(
            command + [text],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        raise VoiceSynthesisError(f"Could not start '{command[0]}': {e}") from e
    logger.debug("Started %s for %d characters", command[0], len(text))
