# backend/interview_coach/services/llm_service.py
import logging
from typing import Optional

import requests

from .. import config
from ..errors import UpstreamTimeoutError, UpstreamUnavailableError

logger = logging.getLogger(__name__)


class ModelGateway:
    """Text-completion capability used by the analyze handler. Output is untrusted text."""

    configured = True

    def complete(self, prompt: str) -> str:
        raise NotImplementedError


class OpenRouterGateway(ModelGateway):
    """
    OpenAI-compatible chat-completions client (OpenRouter by default).

    - api_key: provider key; calls fail with UpstreamUnavailableError when missing
    - url / model: endpoint and model id
    - timeout: request timeout in seconds, a single attempt is made
    """

    def __init__(
        self,
        api_key: Optional[str],
        url: str = config.OPENROUTER_URL,
        model: str = config.OPENROUTER_MODEL,
        timeout: int = config.LLM_TIMEOUT,
        temperature: float = config.LLM_TEMPERATURE,
        max_tokens: int = config.LLM_MAX_TOKENS,
    ):
        self.api_key = api_key
        self.url = url
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def complete(self, prompt: str) -> str:
        if not self.api_key:
            raise UpstreamUnavailableError("OPENROUTER_API_KEY not configured in environment")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "User-Agent": "interview-coach-backend/1.0",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "user", "content": prompt}
            ],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

        try:
            r = requests.post(self.url, headers=headers, json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise UpstreamTimeoutError(f"Timeout ({self.timeout}s) hitting model provider")
        except requests.exceptions.RequestException as e:
            raise UpstreamUnavailableError(f"Error contacting model provider: {e}")

        if r.status_code in (401, 403):
            raise UpstreamUnavailableError(f"Model provider rejected credentials (HTTP {r.status_code})")
        if r.status_code >= 400:
            raise UpstreamUnavailableError(f"HTTP {r.status_code} from model provider: {r.text[:1000]}")

        try:
            json_obj = r.json()
        except ValueError:
            raise UpstreamUnavailableError(f"Non-JSON body from model provider: {r.text[:500]}")

        # typical shape: {"choices":[{"message":{"role":"assistant","content":"..."}}], ...}
        choices = json_obj.get("choices") if isinstance(json_obj, dict) else None
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            msg = choices[0].get("message") or {}
            content = msg.get("content") if isinstance(msg, dict) else None
            if isinstance(content, str):
                logger.debug("model reply received (%d chars)", len(content))
                return content
        raise UpstreamUnavailableError(f"Unexpected model provider format: {r.text[:500]}")


def build_gateway() -> ModelGateway:
    if not config.OPENROUTER_API_KEY:
        logger.warning("OPENROUTER_API_KEY not set. Analyze calls will fail until set.")
    return OpenRouterGateway(config.OPENROUTER_API_KEY)
