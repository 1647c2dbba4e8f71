from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from config.settings import Settings, get_settings


DEFAULT_FEATURES: Dict[str, Dict[str, Any]] = {
    "entities": {},
    "keywords": {},
    "categories": {},
}


class TextAnalyzerError(RuntimeError):
    pass


class AnalysisResult(BaseModel):
    """Entities, keywords and categories extracted from one piece of text.

    Arrays are kept verbatim; any of them may be missing from the response.
    """

    model_config = ConfigDict(extra="allow")

    entities: Optional[List[Dict[str, Any]]] = None
    keywords: Optional[List[Dict[str, Any]]] = None
    categories: Optional[List[Dict[str, Any]]] = None


class TextAnalyzerClient:
    def __init__(
        self,
        url: str,
        version_date: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url.rstrip("/")
        self.version_date = version_date
        self.auth = (username, password) if username and password else None
        self.timeout = timeout
        self.transport = transport

    async def analyze(
        self, text: str, features: Optional[Dict[str, Dict[str, Any]]] = None
    ) -> AnalysisResult:
        payload = {
            "text": text,
            "features": features if features is not None else DEFAULT_FEATURES,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, auth=self.auth, transport=self.transport
            ) as client:
                response = await client.post(
                    f"{self.url}/v1/analyze",
                    params={"version": self.version_date},
                    json=payload,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise TextAnalyzerError(f"Text analyzer call failed: {exc}") from exc
        except ValueError as exc:
            raise TextAnalyzerError(f"Text analyzer returned invalid JSON: {exc}") from exc

        try:
            return AnalysisResult.model_validate(data)
        except ValidationError as exc:
            raise TextAnalyzerError(f"Unexpected text analyzer response: {exc}") from exc


def build_text_analyzer(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> TextAnalyzerClient:
    settings = settings or get_settings()
    return TextAnalyzerClient(
        url=settings.nlu_url,
        version_date=settings.nlu_version_date,
        username=settings.nlu_username,
        password=settings.nlu_password,
        timeout=settings.http_timeout,
        transport=transport,
    )
