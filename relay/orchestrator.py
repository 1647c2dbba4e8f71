from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from config.settings import Settings, WORKSPACE_PLACEHOLDER, get_settings
from relay.clients import (
    AnalysisResult,
    DialogEngineClient,
    TextAnalyzerClient,
    TextAnalyzerError,
    build_dialog_engine,
    build_text_analyzer,
)
from relay.core.enrichment import enrich_context, output_text, render_analysis


logger = logging.getLogger(__name__)

SAMPLE_INPUT = "sample input"

UNCONFIGURED_MESSAGE = (
    "The app has not been configured with a <b>WORKSPACE_ID</b> environment variable. "
    "Please refer to the README documentation on how to set this variable. <br>"
    "Once a workspace has been defined the intents may be imported from the "
    "training workspace in order to get a working application."
)


class MessageOrchestrator:
    """Relays one chat turn: analyze the text, enrich the context, ask the
    dialog engine, then append the analysis to the reply for display."""

    def __init__(
        self,
        analyzer: TextAnalyzerClient,
        dialog: DialogEngineClient,
        workspace_id: Optional[str],
        context_key_prefix: str = "analysis_",
    ) -> None:
        self.analyzer = analyzer
        self.dialog = dialog
        self.workspace_id = workspace_id
        self.context_key_prefix = context_key_prefix

    @property
    def configured(self) -> bool:
        return bool(self.workspace_id) and self.workspace_id != WORKSPACE_PLACEHOLDER

    async def _analyze(self, text: Optional[str]) -> Optional[AnalysisResult]:
        if text is None or text == "":
            logger.info("No input text; skipping analysis")
            return None
        try:
            return await self.analyzer.analyze(text)
        except TextAnalyzerError as exc:
            logger.warning("Analysis unavailable, continuing without it: %s", exc)
            return None

    async def handle_message(self, request: Dict[str, Any]) -> Dict[str, Any]:
        if not self.configured:
            logger.warning("WORKSPACE_ID not configured; returning setup instructions")
            return {"output": {"text": UNCONFIGURED_MESSAGE}}

        user_input = request.get("input")
        context = request.get("context")

        if user_input is None:
            text = SAMPLE_INPUT
        else:
            text = user_input.get("text")

        logger.info(
            "Incoming message: text_len=%s context_keys=%s",
            len(text or ""),
            len(context or {}),
        )

        analysis = await self._analyze(text)
        enriched, merged = enrich_context(context, analysis, self.context_key_prefix)
        logger.info("Context enriched with: %s", merged or "nothing")

        reply = await self.dialog.message(
            workspace_id=self.workspace_id,
            context=enriched,
            input=user_input if user_input is not None else {},
        )

        body = reply.model_dump()
        rendered = render_analysis(body.get("context"), self.context_key_prefix)
        if rendered:
            output = body.get("output") or {}
            output["text"] = output_text(output) + rendered
            body["output"] = output
        return body


def build_orchestrator(settings: Optional[Settings] = None) -> MessageOrchestrator:
    settings = settings or get_settings()
    return MessageOrchestrator(
        analyzer=build_text_analyzer(settings),
        dialog=build_dialog_engine(settings),
        workspace_id=settings.workspace_id,
        context_key_prefix=settings.context_key_prefix,
    )
