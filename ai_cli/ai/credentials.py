import logging

import keyring
from keyring.errors import KeyringError
from rich.prompt import Prompt

from .errors import CredentialError


logger = logging.getLogger(__name__)

SERVICE_NAME = "ai-cli"
USERNAME = "user"


def get_secret(service: str = SERVICE_NAME, account: str = USERNAME) -> str:
    """Loads the API key from the system keyring.

    Raises:
        CredentialError: If the keyring cannot be read or holds no key.
    """
    try:
        secret = keyring.get_password(service, account)
    except KeyringError as e:
        raise CredentialError(f"Failed to access the system keyring: {e}") from e

    if not secret:
        raise CredentialError(
            "API key not found. Run `ai-cli config` to store your 1min.ai API key."
        )
    return secret


def set_secret(service: str, account: str, secret: str):
    try:
        keyring.set_password(service, account, secret)
    except KeyringError as e:
        raise CredentialError(f"Failed to store the API key in the keyring: {e}") from e
    logger.debug("Stored API key for %s/%s", service, account)


def configure_api_key(console=None):
    """Asks the user for their API key and saves it in the keyring."""
    api_key = ""
    try:
        while not api_key:
            api_key = Prompt.ask(
                "Please enter your 1min.ai API key", password=True, console=console
            ).strip()
    except (KeyboardInterrupt, EOFError):
        raise CredentialError("No API key entered.") from None
    set_secret(SERVICE_NAME, USERNAME, api_key)
