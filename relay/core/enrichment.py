"""Merging analysis results into the dialog context, and rendering them back
into the reply text for display."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from relay.clients.text_analyzer import AnalysisResult


FEATURES = ("entities", "keywords", "categories")

# feature -> (section title, display field, number field)
SECTIONS: Dict[str, Tuple[str, str, str]] = {
    "entities": ("Entities", "label", "score"),
    "keywords": ("Keywords", "text", "relevance"),
    "categories": ("Categories", "label", "score"),
}

LINE_BREAK = "<br />"


def context_key(feature: str, prefix: str) -> str:
    return f"{prefix}{feature}"


def enrich_context(
    context: Optional[Dict[str, Any]],
    analysis: Optional[AnalysisResult],
    prefix: str,
) -> Tuple[Dict[str, Any], List[str]]:
    """Return a copy of ``context`` with the non-empty analysis arrays added.

    The second element lists the keys that were set.
    """
    enriched: Dict[str, Any] = dict(context) if context is not None else {}
    merged: List[str] = []
    if analysis is None:
        return enriched, merged

    for feature in FEATURES:
        values = getattr(analysis, feature)
        if values is not None and len(values) > 0:
            key = context_key(feature, prefix)
            enriched[key] = values
            merged.append(key)
    return enriched, merged


def format_number(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "undefined"
    if not isinstance(value, float):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"

    # positional between 1e-6 and 1e21, exponent form without zero padding outside
    magnitude = abs(value)
    if value.is_integer() and magnitude < 1e21:
        return str(int(value))
    text = repr(value)
    if 1e-6 <= magnitude < 1e21 and "e" in text:
        return format(Decimal(text), "f")
    return text.replace("e-0", "e-").replace("e+0", "e+")


def _display(item: Any, field: str, fallback: str) -> Any:
    if not isinstance(item, dict):
        return None
    if field in item:
        return item[field]
    return item.get(fallback)


def render_section(feature: str, items: Sequence[Any]) -> str:
    title, name_field, number_field = SECTIONS[feature]
    # entities from the analyzer may carry text/relevance instead of label/score
    name_fallback = "text" if name_field == "label" else "label"
    number_fallback = "relevance" if number_field == "score" else "score"

    lines = [f"{LINE_BREAK}<strong>NLU API {title}:</strong>{LINE_BREAK}"]
    for item in items:
        name = _display(item, name_field, name_fallback)
        number = _display(item, number_field, number_fallback)
        lines.append(
            f"{format_number(name)} ({number_field}: {format_number(number)}),{LINE_BREAK}"
        )
    return "".join(lines)


def render_analysis(context: Optional[Dict[str, Any]], prefix: str) -> str:
    if not context:
        return ""
    rendered = []
    for feature in FEATURES:
        items = context.get(context_key(feature, prefix))
        if isinstance(items, (list, tuple)) and len(items) > 0:
            rendered.append(render_section(feature, items))
    return "".join(rendered)


def output_text(output: Dict[str, Any]) -> str:
    text = output.get("text")
    if text is None:
        return ""
    if isinstance(text, (list, tuple)):
        return " ".join(str(part) for part in text)
    return str(text)
