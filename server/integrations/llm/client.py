"""LLM client — supports OpenAI-compatible cloud APIs and local Ollama."""
import httpx
from typing import Optional
from config.settings import settings
import logging

logger = logging.getLogger(__name__)


class LLMClient:
    """Wrapper for LLM API — OpenAI-compatible chat completions or local Ollama."""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        use_cloud: Optional[bool] = None,
    ):
        self.endpoint = (endpoint or settings.LLM_ENDPOINT).rstrip("/")
        self.model = model or settings.LLM_MODEL
        self.api_key = api_key or settings.LLM_API_KEY
        self.use_cloud = settings.USE_CLOUD_LLM if use_cloud is None else use_cloud
        self.max_tokens = settings.LLM_MAX_TOKENS

        headers: dict[str, str] = {}
        if self.use_cloud and self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        # Default timeout, overridable per request via timeout_s
        self.client = httpx.AsyncClient(timeout=float(settings.LLM_TIMEOUT), headers=headers)

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        timeout_s: Optional[int] = None,
    ) -> str:
        """Generate text completion. Returns "" when the model produced nothing."""
        effective_timeout = timeout_s or settings.LLM_TIMEOUT

        try:
            if self.use_cloud:
                messages = []
                if system_prompt:
                    messages.append({"role": "system", "content": system_prompt})
                if prompt:
                    messages.append({"role": "user", "content": prompt})

                payload: dict = {
                    "model": self.model,
                    "messages": messages,
                    "temperature": temperature,
                    "max_tokens": self.max_tokens,
                }

                response = await self.client.post(
                    f"{self.endpoint}/v1/chat/completions",
                    json=payload,
                    timeout=effective_timeout,
                )
                response.raise_for_status()
                result = response.json()
                choices = result.get("choices") or []
                if not choices:
                    return ""
                return (choices[0].get("message") or {}).get("content") or ""

            else:
                # Local Ollama API
                full_prompt = prompt
                if system_prompt:
                    full_prompt = f"{system_prompt}\n\n{prompt}" if prompt else system_prompt

                payload = {
                    "model": self.model,
                    "prompt": full_prompt,
                    "stream": False,
                    "options": {"temperature": temperature, "num_predict": self.max_tokens},
                }

                response = await self.client.post(
                    f"{self.endpoint}/api/generate",
                    json=payload,
                    timeout=effective_timeout,
                )
                response.raise_for_status()
                result = response.json()
                return result.get("response", "")

        except httpx.TimeoutException:
            logger.error(f"LLM request timed out after {effective_timeout}s")
            raise TimeoutError(f"LLM request timed out after {effective_timeout}s")
        except Exception as e:
            logger.error(f"LLM generation error: {e}")
            raise

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()
