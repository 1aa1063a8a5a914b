from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Protocol

import httpx

from ecoware.core.config import Settings
from ecoware.core.errors import RemoteCallError
from ecoware.schemas.advisor import EmissionSnapshot

PLACEHOLDER_MARKER = "your-"


class CompletionProvider(Protocol):
    name: str

    def complete(self, question: str, snapshot: EmissionSnapshot) -> str: ...


def build_system_prompt(snapshot: EmissionSnapshot) -> str:
    item_lines = "\n".join(f"- {item.name}: {item.carbon:.1f} kg CO₂" for item in snapshot.item_totals)
    return (
        "You are an AI Emission Advisor for warehouses. Analyze the user's warehouse data and provide "
        "personalized recommendations to reduce carbon emissions. \n\n"
        "Current warehouse data:\n"
        f"{item_lines}\n"
        f"Total carbon footprint: {snapshot.total_carbon:.1f} kg CO₂\n\n"
        "Provide practical, actionable advice with specific examples and cost estimates when possible. "
        "Keep responses concise but informative."
    )


class RemoteProvider(ABC):
    name = "remote"

    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        self.settings = settings
        self.client = client
        self.api_key = settings.api_key_for(self.name)
        self.endpoint = settings.endpoint_for(self.name)
        self.model = settings.model_for(self.name)

    def _check_key(self) -> str:
        if not self.api_key or PLACEHOLDER_MARKER in self.api_key:
            raise RemoteCallError(
                f"Please configure your {self.name} API key",
                code="missing_api_key",
                details={"provider": self.name},
            )
        return self.api_key

    def _post(self, url: str, body: dict[str, Any], headers: dict[str, str]) -> dict[str, Any]:
        try:
            if self.client is not None:
                response = self.client.post(url, json=body, headers=headers)
            else:
                response = httpx.post(url, json=body, headers=headers, timeout=self.settings.advisor_timeout_seconds)
        except httpx.HTTPError as exc:
            raise RemoteCallError(f"Failed to reach {self.name} API: {exc}", details={"provider": self.name}) from exc

        if response.status_code >= 400:
            raise RemoteCallError(
                f"{self.name} API error: {response.status_code}",
                code="http_error",
                details={"provider": self.name, "status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as exc:
            raise RemoteCallError(f"{self.name} API returned invalid JSON", details={"provider": self.name}) from exc

    @abstractmethod
    def _request(self, question: str, system_prompt: str, api_key: str) -> tuple[str, dict[str, Any], dict[str, str]]:
        """Return the url, JSON body and headers for one completion call."""

    @abstractmethod
    def _extract(self, payload: dict[str, Any]) -> str:
        """Pull the reply text out of a decoded response payload."""

    def complete(self, question: str, snapshot: EmissionSnapshot) -> str:
        api_key = self._check_key()
        url, body, headers = self._request(question, build_system_prompt(snapshot), api_key)
        payload = self._post(url, body, headers)
        try:
            text = self._extract(payload)
        except (KeyError, IndexError, TypeError) as exc:
            raise RemoteCallError(
                f"{self.name} API returned an unexpected payload", details={"provider": self.name}
            ) from exc
        if not isinstance(text, str) or not text.strip():
            raise RemoteCallError(f"{self.name} API returned an empty response", details={"provider": self.name})
        return text


class OpenAIProvider(RemoteProvider):
    name = "openai"

    def _request(self, question, system_prompt, api_key):
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": question},
            ],
            "max_tokens": self.settings.advisor_max_tokens,
            "temperature": self.settings.advisor_temperature,
        }
        headers = {"Content-Type": "application/json", "Authorization": f"Bearer {api_key}"}
        return self.endpoint, body, headers

    def _extract(self, payload):
        return payload["choices"][0]["message"]["content"]


class AnthropicProvider(RemoteProvider):
    name = "anthropic"

    def _request(self, question, system_prompt, api_key):
        body = {
            "model": self.model,
            "max_tokens": self.settings.advisor_max_tokens,
            "system": system_prompt,
            "messages": [{"role": "user", "content": question}],
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": api_key,
            "anthropic-version": "2023-06-01",
        }
        return self.endpoint, body, headers

    def _extract(self, payload):
        return payload["content"][0]["text"]


class GoogleProvider(RemoteProvider):
    name = "google"

    def _request(self, question, system_prompt, api_key):
        body = {
            "contents": [{"parts": [{"text": system_prompt}, {"text": question}]}],
            "generationConfig": {
                "maxOutputTokens": self.settings.advisor_max_tokens,
                "temperature": self.settings.advisor_temperature,
            },
        }
        headers = {"Content-Type": "application/json"}
        return f"{self.endpoint}?key={api_key}", body, headers

    def _extract(self, payload):
        return payload["candidates"][0]["content"]["parts"][0]["text"]


REMOTE_PROVIDERS: dict[str, type[RemoteProvider]] = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "google": GoogleProvider,
}
