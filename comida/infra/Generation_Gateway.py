"""OpenAI-backed generation gateway (Responses API with strict JSON schema output)."""
import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from comida.domain.errors import GenerationFailure
from comida.utilities.config import OPENAI_API_KEY, OPENAI_MODEL, OPENAI_TIMEOUT

logger = logging.getLogger(__name__)


# === Helper: Get OpenAI Client ===
def _get_openai_client(api_key: str, timeout: float) -> Optional[OpenAI]:
    """Return an OpenAI client if an API key is available, otherwise None."""
    if not api_key:
        return None
    return OpenAI(api_key=api_key, timeout=timeout)


class OpenAIGenerationGateway:
    def __init__(self, api_key: str = OPENAI_API_KEY, model: str = OPENAI_MODEL,
                 timeout: float = OPENAI_TIMEOUT, client: Optional[OpenAI] = None):
        self.model = model
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    def _client_or_fail(self) -> OpenAI:
        if self._client is None:
            self._client = _get_openai_client(self._api_key, self._timeout)
        if self._client is None:
            logger.warning("OPENAI_API_KEY not set; cannot call the generation service.")
            raise GenerationFailure("OPENAI_API_KEY not set")
        return self._client

    def complete(self, prompt: str, schema: dict, name: str) -> str:
        """Send one request and return the raw output text (expected JSON)."""
        client = self._client_or_fail()
        try:
            response = client.responses.create(
                model=self.model,
                input=prompt,
                text={
                    "format": {
                        "type": "json_schema",
                        "name": name,
                        "schema": schema,
                        "strict": True,
                    }
                },
            )
        except OpenAIError as e:
            logger.exception("Generation request %s failed", name)
            raise GenerationFailure(f"Generation request {name} failed: {e}") from e
        return (response.output_text or "").strip()
