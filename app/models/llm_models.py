# app/models/llm_models.py
from pydantic import BaseModel, ConfigDict
from typing import Optional

GENERATIVE_LANGUAGE_BASE_URL = "https://generativelanguage.googleapis.com"


class ModelCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_version: str
    model_id: str

    @property
    def endpoint(self) -> str:
        """generateContent URL for this candidate, without the credential."""
        return f"{GENERATIVE_LANGUAGE_BASE_URL}/{self.api_version}/models/{self.model_id}:generateContent"

    def __str__(self) -> str:
        return f"{self.api_version}/{self.model_id}"


class UpstreamResult(BaseModel):
    candidate: ModelCandidate
    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.text is not None
