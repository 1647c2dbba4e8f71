from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from config.settings import Settings, get_settings


class DialogEngineError(RuntimeError):
    """Dialog engine call failed.

    ``code`` is the HTTP status to hand back to the client and ``body`` the
    error object exactly as the engine reported it.
    """

    def __init__(self, code: int, body: Dict[str, Any]) -> None:
        super().__init__(body.get("error") or f"Dialog engine call failed ({code})")
        self.code = code
        self.body = body


class DialogReply(BaseModel):
    model_config = ConfigDict(extra="allow")

    output: Dict[str, Any] = Field(default_factory=dict)
    context: Dict[str, Any] = Field(default_factory=dict)


def _error_from_response(response: httpx.Response) -> DialogEngineError:
    try:
        body = response.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        body = {"error": response.text or response.reason_phrase, "code": response.status_code}

    # the engine's own error code wins over the transport status
    declared = body.get("code")
    if isinstance(declared, int) and not isinstance(declared, bool) and 400 <= declared < 600:
        return DialogEngineError(declared, body)
    return DialogEngineError(response.status_code or 500, body)


class DialogEngineClient:
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

    async def message(
        self,
        workspace_id: str,
        context: Dict[str, Any],
        input: Dict[str, Any],
    ) -> DialogReply:
        payload = {"input": input, "context": context}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, auth=self.auth, transport=self.transport
            ) as client:
                response = await client.post(
                    f"{self.url}/v1/workspaces/{workspace_id}/message",
                    params={"version": self.version_date},
                    json=payload,
                )
        except httpx.HTTPError as exc:
            raise DialogEngineError(
                500, {"error": f"Dialog engine call failed: {exc}", "code": 500}
            ) from exc

        if response.is_error:
            raise _error_from_response(response)

        try:
            return DialogReply.model_validate(response.json())
        except ValueError as exc:
            raise DialogEngineError(
                500, {"error": f"Unexpected dialog engine response: {exc}", "code": 500}
            ) from exc


def build_dialog_engine(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> DialogEngineClient:
    settings = settings or get_settings()
    return DialogEngineClient(
        url=settings.conversation_url,
        version_date=settings.conversation_version_date,
        username=settings.conversation_username,
        password=settings.conversation_password,
        timeout=settings.http_timeout,
        transport=transport,
    )
