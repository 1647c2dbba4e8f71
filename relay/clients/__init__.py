from relay.clients.dialog_engine import (
    DialogEngineClient,
    DialogEngineError,
    DialogReply,
    build_dialog_engine,
)
from relay.clients.text_analyzer import (
    AnalysisResult,
    TextAnalyzerClient,
    TextAnalyzerError,
    build_text_analyzer,
)

__all__ = [
    "AnalysisResult",
    "DialogEngineClient",
    "DialogEngineError",
    "DialogReply",
    "TextAnalyzerClient",
    "TextAnalyzerError",
    "build_dialog_engine",
    "build_text_analyzer",
]
