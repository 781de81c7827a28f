from dataclasses import dataclass
from typing import List, Optional

from .errors import ConfigurationError


MODELS = ["o1-preview", "o3-mini", "gpt-4o", "gpt-4o-mini", "deepseek-r1"]
IMAGE_SIZES = ["1024x1024", "1024x1792", "1792x1024"]
IMAGE_QUALITIES = ["standard", "hd"]
IMAGE_STYLES = ["vivid", "natural"]

DEFAULT_MODEL = "o3-mini"
DEFAULT_IMAGE_MODEL = "dall-e-3"
DEFAULT_IMAGE_SIZE = "1024x1024"
DEFAULT_IMAGE_QUALITY = "standard"
DEFAULT_IMAGE_STYLE = "vivid"
MAX_WORDS = 500


@dataclass(frozen=True)
class Configuration:
    """Everything the session needs to know about one invocation.

    Built once from the parsed command line and never mutated afterwards.
    """

    prompt: Optional[str] = None
    interactive: bool = False
    voice_output: bool = False
    quiet: bool = False
    model: str = DEFAULT_MODEL
    words: Optional[int] = MAX_WORDS
    web_search: bool = False
    image_generation: bool = False
    size: str = DEFAULT_IMAGE_SIZE
    quality: str = DEFAULT_IMAGE_QUALITY
    style: str = DEFAULT_IMAGE_STYLE
    output: Optional[str] = None

    def problems(self) -> List[str]:
        """Returns a message for every option combination that cannot work."""
        errors = []
        if self.quiet and not self.voice_output:
            errors.append("Quiet mode requires voice output to be enabled.")
        if self.image_generation and self.interactive:
            errors.append("Image generation is not compatible with interactive mode.")
        if self.image_generation and self.voice_output:
            errors.append("Image generation is not compatible with voice output mode.")
        if self.image_generation and not self.prompt:
            errors.append("No prompt provided for image generation.")
        if self.words is not None and self.words <= 0:
            errors.append("The maximum number of words must be a positive integer.")
        return errors

    def validate(self) -> "Configuration":
        errors = self.problems()
        if errors:
            raise ConfigurationError("\n".join(errors))
        return self
