from .config import Configuration
from .conversation import ConversationState
from .errors import ConfigurationError
from .llm import ChatRequest, ImageRequest, Request


def build_request(config: Configuration, state: ConversationState) -> Request:
    """
    Builds the single request for the current turn.

    Image generation ignores history and only uses the newest user prompt.
    Chat requests carry the whole conversation so far, newest user turn last.
    """
    if config.image_generation and (config.interactive or config.voice_output):
        raise ConfigurationError(
            "Image generation cannot be combined with interactive mode or voice output."
        )

    latest = state.latest_user()
    if latest is None:
        raise ConfigurationError("There is no prompt to send.")

    if config.image_generation:
        return ImageRequest(
            prompt=latest.content,
            size=config.size,
            quality=config.quality,
            style=config.style,
        )

    return ChatRequest(
        model=config.model,
        messages=state.turns,
        max_words=config.words,
        web_search=config.web_search,
    )
