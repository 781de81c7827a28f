import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Tuple, Union
from urllib.parse import urlsplit

import httpx

from .config import DEFAULT_IMAGE_MODEL
from .conversation import Role, Turn
from .errors import TransportError


logger = logging.getLogger(__name__)

API_BASE_URL = "https://api.1min.ai"
CONVERSATIONS_PATH = "/api/conversations"
FEATURES_PATH = "/api/features"
DEFAULT_IMAGE_FILENAME = "1minAI_output.png"
REQUEST_TIMEOUT = 120.0


@dataclass(frozen=True)
class ChatRequest:
    model: str
    messages: Tuple[Turn, ...]
    max_words: Optional[int] = None
    web_search: bool = False


@dataclass(frozen=True)
class ImageRequest:
    prompt: str
    size: str
    quality: str
    style: str


@dataclass(frozen=True)
class TextResponse:
    content: str


@dataclass(frozen=True)
class ImageResponse:
    url: str
    # Local file the image was saved to, once downloaded.
    path: Optional[str] = None


Request = Union[ChatRequest, ImageRequest]
Response = Union[TextResponse, ImageResponse]


class OneMinClient:
    """
    A thin wrapper over the 1min.ai HTTP API.

    Each call to `execute` is a single blocking round trip with no retry. Any
    failure (network, HTTP status or payload shape) is raised as a
    `TransportError` so the caller decides whether the session survives it.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initializes the client.

        Args:
            base_url: Root URL of the 1min.ai API.
            http_client: Pre-configured `httpx.Client`, mostly useful for tests.
                When omitted, a client with a generous timeout is created and
                owned by this instance.
        """
        self.base_url = base_url.rstrip("/")
        self._http = http_client or httpx.Client(timeout=REQUEST_TIMEOUT)
        self._conversation_id: Optional[str] = None

    def __enter__(self) -> "OneMinClient":
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        self._http.close()

    @staticmethod
    def format_prompt(messages: Tuple[Turn, ...]) -> str:
        """Flattens the conversation into the single prompt field the API accepts."""
        if len(messages) == 1:
            return messages[0].content
        labels = {Role.USER: "User", Role.ASSISTANT: "Assistant"}
        return "\n\n".join(f"{labels[turn.role]}: {turn.content}" for turn in messages)

    @staticmethod
    def format_chat_payload(request: ChatRequest, conversation_id: str) -> Dict:
        return {
            "type": "CHAT_WITH_AI",
            "conversationId": conversation_id,
            "model": request.model,
            "promptObject": {
                "prompt": OneMinClient.format_prompt(request.messages),
                "isMixed": False,
                "webSearch": request.web_search,
                "numOfSite": 1 if request.web_search else 0,
                "maxWord": request.max_words,
            },
        }

    @staticmethod
    def format_image_payload(request: ImageRequest) -> Dict:
        return {
            "type": "IMAGE_GENERATOR",
            "model": DEFAULT_IMAGE_MODEL,
            "promptObject": {
                "prompt": request.prompt,
                "n": 1,
                "size": request.size,
                "quality": request.quality,
                "style": request.style,
            },
        }

    def execute(self, request: Request, api_key: str) -> Response:
        if isinstance(request, ChatRequest):
            return self._chat(request, api_key)
        if isinstance(request, ImageRequest):
            return self._generate_image(request, api_key)
        raise TypeError(f"Unsupported request type: {type(request).__name__}")

    def _chat(self, request: ChatRequest, api_key: str) -> TextResponse:
        conversation_id = self._ensure_conversation(api_key)
        payload = self.format_chat_payload(request, conversation_id)
        logger.debug(
            "Chat request | model=%s turns=%d web_search=%s",
            request.model,
            len(request.messages),
            request.web_search,
        )
        body = self._post(FEATURES_PATH, payload, api_key)
        return TextResponse(content=self._extract_text(body))

    def _generate_image(self, request: ImageRequest, api_key: str) -> ImageResponse:
        logger.debug(
            "Image request | size=%s quality=%s style=%s",
            request.size,
            request.quality,
            request.style,
        )
        body = self._post(FEATURES_PATH, self.format_image_payload(request), api_key)
        record = body.get("aiRecord") if isinstance(body, dict) else None
        if not isinstance(record, dict):
            raise TransportError("Image response is missing 'aiRecord'.")

        status = record.get("status")
        if status != "SUCCESS":
            raise TransportError(f"Image generation failed with status: {status}")

        url = record.get("temporaryUrl") or ""
        if not url:
            raise TransportError("No image URL found in response")
        return ImageResponse(url=url)

    def _ensure_conversation(self, api_key: str) -> str:
        if self._conversation_id is None:
            now = datetime.now().strftime("%Y/%m/%d at %I:%M:%S %p")
            body = self._post(
                CONVERSATIONS_PATH,
                {"type": "CHAT_WITH_AI", "title": f"API - {now}"},
                api_key,
            )
            try:
                self._conversation_id = body["conversation"]["uuid"]
            except (KeyError, TypeError):
                raise TransportError("Conversation response is missing 'conversation.uuid'.")
            logger.debug("Created conversation %s", self._conversation_id)
        return self._conversation_id

    def _post(self, path: str, payload: Dict, api_key: str):
        headers = {"API-KEY": api_key, "Content-Type": "application/json"}
        try:
            response = self._http.post(f"{self.base_url}{path}", headers=headers, json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"Error communicating with {path}: {e}") from e

        if not response.is_success:
            raise TransportError(self._describe_error(response))

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Response from {path} was not valid JSON: {e}") from e

    @staticmethod
    def _describe_error(response: httpx.Response) -> str:
        text = response.text
        message = text
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and isinstance(body.get("message"), str):
            message = body["message"]
            # The API prefixes some messages with their status code, e.g. "400 Bad prompt".
            code, _, rest = message.partition(" ")
            if rest and code.isdigit():
                message = rest

        description = f"{response.status_code} - {message}"
        if response.status_code == 401:
            description += "\nYour API key was rejected. Run `ai-cli config` to set a new one."
        return description

    @staticmethod
    def _extract_text(body) -> str:
        try:
            result = body["aiRecord"]["aiRecordDetail"]["resultObject"]
        except (KeyError, TypeError):
            raise TransportError("Chat response is missing 'aiRecord.aiRecordDetail.resultObject'.")

        if isinstance(result, list):
            return "\n".join(str(part) for part in result).strip()
        if isinstance(result, str):
            return result.strip()
        raise TransportError("Chat response did not include assistant content.")

    @staticmethod
    def image_filename(url: str) -> str:
        """Derives a local file name from the image URL, ignoring its query string."""
        name = os.path.basename(urlsplit(url).path)
        return name or DEFAULT_IMAGE_FILENAME

    def download_image(self, url: str, destination: Optional[str] = None) -> str:
        """Fetches the generated image and writes it to disk, returning the path."""
        path = destination or self.image_filename(url)
        try:
            response = self._http.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TransportError(f"Could not download image: {e}") from e

        try:
            with open(path, "wb") as f:
                f.write(response.content)
        except OSError as e:
            raise TransportError(f"Could not save image to '{path}': {e}") from e

        logger.debug("Saved %d bytes to %s", len(response.content), path)
        return path
