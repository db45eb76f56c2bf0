# backend/interview_coach/llm/normalizer.py
"""
Turns raw, untrusted model text into a FeedbackResult.

Parsing runs in two stages and reports which one succeeded through ParseOutcome:
  STRICT     the whole (trimmed) text is a JSON object
  EXTRACTED  the span from the first "{" to the last "}" is a JSON object
  FAILED     neither worked; normalize() raises UnparseableResponseError

Once an object is found every field is coerced to its schema type, missing or
ill-typed values are replaced by defaults, and the score is clamped to 0..10.
"""
import enum
import json
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..errors import UnparseableResponseError
from ..schemas import FeedbackResult
from .scoring_schema import (
    DEFAULT_FOLLOW_UP,
    DEFAULT_RELEVANCE,
    DEFAULT_SCORE,
    DEFAULT_SUGGESTIONS,
    DEFAULT_TONE,
    KNOWN_TONES,
    REQUIRED_FIELDS,
    SCORE_MAX,
    SCORE_MIN,
)

Diagnostics = Callable[[str, Dict[str, Any]], None]

_LEADING_INT = re.compile(r"^\s*([+-]?)(\d+)")


class ParseStage(enum.Enum):
    STRICT = "strict"
    EXTRACTED = "extracted"
    FAILED = "failed"


@dataclass(frozen=True)
class ParseOutcome:
    stage: ParseStage
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.stage is not ParseStage.FAILED


def _loads_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        obj = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return obj if isinstance(obj, dict) else None


def parse_model_output(raw_text: Optional[str]) -> ParseOutcome:
    text = (raw_text or "").strip()

    obj = _loads_object(text)
    if obj is not None:
        return ParseOutcome(ParseStage.STRICT, obj)

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return ParseOutcome(ParseStage.FAILED, error="No JSON found in AI response")

    obj = _loads_object(text[start : end + 1])
    if obj is not None:
        return ParseOutcome(ParseStage.EXTRACTED, obj)
    return ParseOutcome(ParseStage.FAILED, error="Unable to parse AI response as JSON")


def parse_leading_int(text: str) -> Optional[int]:
    """
    Leading integer of a string, read like parseInt ("8/10" -> 8, "abc" -> None).
    Digit runs too long for int() saturate at +/-10**18, which every caller clamps.
    """
    m = _LEADING_INT.match(text or "")
    if not m:
        return None
    sign, digits = m.group(1), m.group(2).lstrip("0") or "0"
    if len(digits) > 18:
        value = 10 ** 18
    else:
        value = int(digits)
    return -value if sign == "-" else value


def coerce_score(value: Any) -> int:
    """
    Score policy: numbers are truncated toward zero, strings are read like
    parseInt ("8/10" -> 8), anything else becomes DEFAULT_SCORE. Result is clamped.
    """
    score = None
    if isinstance(value, bool):
        score = None
    elif isinstance(value, int):
        score = value
    elif isinstance(value, float):
        score = int(value) if math.isfinite(value) else None
    elif isinstance(value, str):
        score = parse_leading_int(value)

    if score is None:
        score = DEFAULT_SCORE
    return max(SCORE_MIN, min(SCORE_MAX, score))


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, str) else json.dumps(item) for item in value if item is not None]


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return default


class ResponseNormalizer:
    """
    One instance per request. `diagnostics`, if given, is called with
    (event, detail) for missing fields, parse fallbacks and unknown tones.
    """

    def __init__(self, diagnostics: Optional[Diagnostics] = None):
        self._diagnostics = diagnostics

    def _emit(self, event: str, **detail: Any) -> None:
        if self._diagnostics is not None:
            self._diagnostics(event, detail)

    def parse(self, raw_text: Optional[str]) -> ParseOutcome:
        outcome = parse_model_output(raw_text)
        if outcome.stage is not ParseStage.STRICT:
            self._emit("strict_parse_failed", stage=outcome.stage.value, error=outcome.error)
        return outcome

    def coerce(self, obj: Mapping[str, Any]) -> FeedbackResult:
        missing = [f for f in REQUIRED_FIELDS if f not in obj]
        if missing:
            self._emit("missing_fields", fields=missing)

        tone = _text(obj.get("tone"), DEFAULT_TONE)
        if tone not in KNOWN_TONES:
            self._emit("unrecognized_tone", tone=tone)

        return FeedbackResult(
            tone=tone,
            filler_words=_string_list(obj.get("fillerWords")),
            grammar_issues=_string_list(obj.get("grammarIssues")),
            relevance=_text(obj.get("relevance"), DEFAULT_RELEVANCE),
            score=coerce_score(obj.get("score")),
            suggestions=_text(obj.get("suggestions"), DEFAULT_SUGGESTIONS),
            follow_up=_text(obj.get("followUp"), DEFAULT_FOLLOW_UP),
        )

    def normalize(self, raw_text: Optional[str]) -> FeedbackResult:
        outcome = self.parse(raw_text)
        if not outcome.ok:
            raise UnparseableResponseError(outcome.error)
        return self.coerce(outcome.data)


def normalize(raw_text: Optional[str], diagnostics: Optional[Diagnostics] = None) -> FeedbackResult:
    return ResponseNormalizer(diagnostics).normalize(raw_text)
