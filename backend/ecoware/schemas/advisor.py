from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ItemCarbon(BaseModel):
    name: str
    carbon: float


class EmissionSnapshot(BaseModel):
    item_totals: list[ItemCarbon] = Field(default_factory=list)
    total_carbon: float = 0.0


class AdvisorChatRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    message: str = Field(..., min_length=1, description="Question for the emission advisor.")


class AdvisorChatResponse(BaseModel):
    reply: str
    provider: str
    source: str = Field(description="'remote' when the provider answered, 'local' otherwise.")
    used_fallback: bool = False


class AdvisorWelcomeResponse(BaseModel):
    message: str
    total_carbon: float
