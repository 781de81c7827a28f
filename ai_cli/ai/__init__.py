"""
The `ai` package holds the session engine of the command-line client: the
request dispatcher, the 1min.ai transport, the conversation log and the output
sinks.
"""

from .config import Configuration
from .conversation import ConversationState, Role, Turn
from .credentials import configure_api_key, get_secret, set_secret
from .dispatcher import build_request
from .errors import (
    AICliError,
    ConfigurationError,
    CredentialError,
    TransportError,
    VoiceSynthesisError,
)
from .llm import (
    ChatRequest,
    ImageRequest,
    ImageResponse,
    OneMinClient,
    TextResponse,
)
from .output import OutputSink
from .session import Session
from .voice import speak


__all__ = [
    "AICliError",
    "ChatRequest",
    "ConfigurationError",
    "Configuration",
    "ConversationState",
    "CredentialError",
    "ImageRequest",
    "ImageResponse",
    "OneMinClient",
    "OutputSink",
    "Role",
    "Session",
    "TextResponse",
    "TransportError",
    "Turn",
    "VoiceSynthesisError",
    "build_request",
    "configure_api_key",
    "get_secret",
    "set_secret",
    "speak",
]
