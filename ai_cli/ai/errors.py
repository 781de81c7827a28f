class AICliError(Exception):
    """Base class for every error the assistant reports to the user."""


class CredentialError(AICliError):
    """The API key is missing or the keyring could not be read."""


class ConfigurationError(AICliError):
    """Mutually exclusive or ineffective options were combined."""


class TransportError(AICliError):
    """The request to the AI service failed or returned an unusable payload."""


class VoiceSynthesisError(AICliError):
    """The text-to-speech command could not be started."""
