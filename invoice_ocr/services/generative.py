"""
Generative re-interpretation of OCR text as invoice JSON.

Talks to an Azure OpenAI chat-completions deployment over httpx. The
backend is configured through an explicit ``GenerativeBackendConfig``,
checked once when the parser is built; calling an unconfigured parser raises
``BackendUnavailable`` instead of failing somewhere inside the request.
"""

import httpx
from loguru import logger
from pydantic import BaseModel, Field

from ..core.config import settings
from ..core.errors import BackendUnavailable, GenerativeBackendError

SYSTEM_PROMPT = """You extract invoice data from OCR text.
Reply with a single JSON object and nothing else, using exactly these keys:
{
  "vendor": string,
  "invoiceNumber": string or null,
  "invoiceDate": "YYYY-MM-DD" or null,
  "subtotal": number, "tax": number, "total": number,
  "lineItems": [{"description": string, "quantity": number, "unitPrice": number, "lineTotal": number}]
}
Use null for anything you cannot read. Do not guess dates."""


class GenerativeBackendConfig(BaseModel):
    base_url: str | None = None
    api_key: str | None = None
    deployment: str | None = None
    api_version: str = "2024-06-01"
    timeout_seconds: float = 30.0
    max_retries: int = Field(2, ge=0)

    @classmethod
    def from_settings(cls) -> "GenerativeBackendConfig":
        return cls(
            base_url=settings.llm_base_url,
            api_key=settings.llm_api_key,
            deployment=settings.llm_deployment,
            api_version=settings.llm_api_version,
            timeout_seconds=settings.llm_timeout_seconds,
            max_retries=settings.llm_max_retries,
        )

    def missing(self) -> list[str]:
        names = {"base_url": "LLM_BASE_URL", "api_key": "LLM_API_KEY", "deployment": "LLM_DEPLOYMENT"}
        return [env for field, env in names.items() if not getattr(self, field)]


def strip_code_fence(text: str) -> str:
    """Drop a surrounding ```json ... ``` fence some models add anyway"""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


class GenerativeParser:
    def __init__(self, config: GenerativeBackendConfig | None = None):
        self.config = config or GenerativeBackendConfig.from_settings()
        missing = self.config.missing()
        self.unavailable_reason = f"missing {', '.join(missing)}" if missing else None

    @property
    def available(self) -> bool:
        return self.unavailable_reason is None

    @property
    def url(self) -> str:
        base = (self.config.base_url or "").rstrip("/")
        return f"{base}/openai/deployments/{self.config.deployment}/chat/completions"

    def _request_body(self, text: str) -> dict:
        return {
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": text},
            ],
            "temperature": 0,
            "response_format": {"type": "json_object"},
        }

    async def parse(self, text: str) -> str:
        """
        Ask the model to re-read ``text`` as invoice JSON.

        Returns the raw message content (fences stripped); validating it is
        the caller's job.

        Raises:
            BackendUnavailable: the backend is not configured
            GenerativeBackendError: HTTP error, or transport failure after retries
        """
        if not self.available:
            raise BackendUnavailable("generative", self.unavailable_reason)

        attempts = self.config.max_retries + 1
        async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
            for attempt in range(1, attempts + 1):
                try:
                    r = await client.post(
                        self.url,
                        params={"api-version": self.config.api_version},
                        headers={"api-key": self.config.api_key},
                        json=self._request_body(text),
                    )
                    r.raise_for_status()
                    break
                except httpx.HTTPStatusError as e:
                    logger.error(
                        "Generative backend returned an error",
                        http_status=e.response.status_code,
                        deployment=self.config.deployment,
                    )
                    raise GenerativeBackendError(
                        f"Generative backend returned HTTP {e.response.status_code}"
                    ) from e
                except httpx.TransportError as e:
                    logger.warning(
                        "Generative backend request failed",
                        attempt=attempt,
                        attempts=attempts,
                        error=str(e),
                    )
                    if attempt == attempts:
                        raise GenerativeBackendError(f"Generative backend unreachable: {e}") from e

        try:
            content = r.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerativeBackendError("Unexpected response shape from generative backend") from e

        if not isinstance(content, str):
            raise GenerativeBackendError("Generative backend returned no message content")

        logger.info("Generative parse complete", chars=len(content))
        return strip_code_fence(content)
