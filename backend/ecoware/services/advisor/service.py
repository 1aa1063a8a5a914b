from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from ecoware.core.config import Settings, settings
from ecoware.core.errors import RemoteCallError
from ecoware.schemas.advisor import EmissionSnapshot, ItemCarbon
from ecoware.schemas.emissions import ActivityEntry
from ecoware.services.advisor.local import LocalAdvisor, local_advice
from ecoware.services.advisor.providers import REMOTE_PROVIDERS, CompletionProvider

logger = logging.getLogger(__name__)

FALLBACK_NOTICE = "⚠️ Note: Using local analysis due to API connection issues."


@dataclass
class AdviceResult:
    text: str
    provider: str
    source: str
    used_fallback: bool = False


class FallbackAdvisor:
    """Wrap a provider and answer locally when the remote call fails."""

    def __init__(self, inner: CompletionProvider) -> None:
        self.inner = inner
        self.name = inner.name

    def advise(self, question: str, snapshot: EmissionSnapshot) -> AdviceResult:
        if isinstance(self.inner, LocalAdvisor):
            return AdviceResult(text=self.inner.complete(question, snapshot), provider=self.name, source="local")

        try:
            text = self.inner.complete(question, snapshot)
        except RemoteCallError as exc:
            logger.warning("Advisor provider %s failed, using local analysis: %s", self.name, exc)
            text = f"{local_advice(question, snapshot)}\n\n{FALLBACK_NOTICE}"
            return AdviceResult(text=text, provider=self.name, source="local", used_fallback=True)

        return AdviceResult(text=text, provider=self.name, source="remote")


def build_provider(config: Settings | None = None, client: httpx.Client | None = None) -> CompletionProvider:
    config = config or settings
    provider_cls = REMOTE_PROVIDERS.get(config.advisor_provider)
    if provider_cls is None:
        return LocalAdvisor()
    return provider_cls(config, client=client)


def build_advisor(config: Settings | None = None, client: httpx.Client | None = None) -> FallbackAdvisor:
    return FallbackAdvisor(build_provider(config, client=client))


def snapshot_from_activities(activities: list[ActivityEntry]) -> EmissionSnapshot:
    return EmissionSnapshot(
        item_totals=[ItemCarbon(name=entry.name, carbon=entry.carbon) for entry in activities],
        total_carbon=sum(entry.carbon for entry in activities),
    )


def generate_advice(question: str, snapshot: EmissionSnapshot, advisor: FallbackAdvisor | None = None) -> AdviceResult:
    advisor = advisor or build_advisor()
    return advisor.advise(question, snapshot)
