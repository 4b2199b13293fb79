"""Text-generation provider clients (Gemini, OpenAI) and the capability registry"""

import httpx
from dataclasses import dataclass
from typing import Any, Dict, Optional
from spend_insights.config import Settings, settings as default_settings
from spend_insights.domain.exceptions import ProviderError
from spend_insights.domain.providers import Provider, AUTO_PREFERENCE
from spend_insights.infrastructure.observability.metrics import provider_latency_histogram


class TextProviderClient:
    """Plain-text prompt in, plain text out"""

    name = "provider"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or default_settings.provider_timeout_seconds
        self.transport = transport

    async def generate(self, prompt: str, system: str = "", temperature: float = 0.2) -> str:
        """
        Send a prompt and return the reply text.

        Raises:
            ProviderError: On timeout, network or HTTP errors, or an unexpected envelope
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with provider_latency_histogram.labels(provider=self.name).time():
                    response = await self._send(client, prompt, system, temperature)
                response.raise_for_status()
                return self._read_text(response.json())

            except httpx.TimeoutException as e:
                raise ProviderError(f"{self.name} timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise ProviderError(f"{self.name} error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise ProviderError(f"{self.name} unreachable: {e}") from e
            except (KeyError, IndexError, ValueError, TypeError) as e:
                raise ProviderError(f"Unexpected {self.name} response envelope: {e}") from e

    async def _send(self, client: httpx.AsyncClient, prompt: str, system: str, temperature: float) -> httpx.Response:
        raise NotImplementedError

    def _read_text(self, data: Dict[str, Any]) -> str:
        raise NotImplementedError


class GeminiClient(TextProviderClient):
    """Google Gemini generateContent API"""

    name = Provider.GEMINI.value

    async def _send(self, client, prompt, system, temperature):
        body: Dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "responseMimeType": "application/json",
            },
        }
        if system:
            body["systemInstruction"] = {"parts": [{"text": system}]}

        return await client.post(
            f"{self.base_url}/models/{self.model}:generateContent",
            params={"key": self.api_key},
            json=body,
        )

    def _read_text(self, data):
        parts = data["candidates"][0]["content"]["parts"]
        return "".join(part.get("text") or "" for part in parts)


class OpenAIClient(TextProviderClient):
    """OpenAI chat completions API"""

    name = Provider.OPENAI.value

    async def _send(self, client, prompt, system, temperature):
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        return await client.post(
            f"{self.base_url}/chat/completions",
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={
                "model": self.model,
                "messages": messages,
                "temperature": temperature,
                "response_format": {"type": "json_object"},
            },
        )

    def _read_text(self, data):
        return data["choices"][0]["message"]["content"] or ""


@dataclass(frozen=True)
class ProviderSelection:
    """Outcome of resolving a requested provider against available credentials"""

    client: Optional[TextProviderClient] = None
    note: Optional[str] = None

    @property
    def name(self) -> str:
        return self.client.name if self.client else Provider.HEURISTIC.value


class ProviderRegistry:
    """Clients for every provider that has a usable credential"""

    def __init__(self, clients: Dict[Provider, TextProviderClient] | None = None):
        self.clients = dict(clients or {})

    @classmethod
    def from_settings(
        cls,
        config: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ProviderRegistry":
        """Register a client for each provider whose API key is set"""
        config = config or default_settings
        clients: Dict[Provider, TextProviderClient] = {}

        if config.gemini_api_key and config.gemini_api_key.strip():
            clients[Provider.GEMINI] = GeminiClient(
                api_key=config.gemini_api_key.strip(),
                model=config.gemini_model,
                base_url=config.gemini_api_base,
                timeout=config.provider_timeout_seconds,
                transport=transport,
            )
        if config.openai_api_key and config.openai_api_key.strip():
            clients[Provider.OPENAI] = OpenAIClient(
                api_key=config.openai_api_key.strip(),
                model=config.openai_model,
                base_url=config.openai_api_base,
                timeout=config.provider_timeout_seconds,
                transport=transport,
            )

        return cls(clients)

    def is_available(self, provider: Provider) -> bool:
        return provider in self.clients

    def select(self, requested: Provider | str, free_only: bool = False) -> ProviderSelection:
        """
        Resolve a request to a concrete client, or to the heuristic path.

        - free_only or heuristic: heuristic
        - named provider without credential: heuristic, with a note
        - auto: first credentialed provider in preference order, else heuristic
        """
        requested = Provider(requested)

        if free_only or requested == Provider.HEURISTIC:
            return ProviderSelection()

        if requested == Provider.AUTO:
            for candidate in AUTO_PREFERENCE:
                if self.is_available(candidate):
                    return ProviderSelection(client=self.clients[candidate])
            return ProviderSelection()

        if not self.is_available(requested):
            key_name = f"{requested.value.upper()}_API_KEY"
            return ProviderSelection(note=f"{key_name} not set; returned heuristic.")

        return ProviderSelection(client=self.clients[requested])
