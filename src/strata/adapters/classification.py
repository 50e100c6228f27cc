"""
Classifier response parsing.

Language-model classifiers answer with JSON, sometimes wrapped in a
markdown code fence. The parser strips the fence, decodes, and validates
every field; anything off raises a typed ClassificationError rather than
falling back to a default.
"""

import json
import re
from typing import Any, Callable, Dict, Optional, Tuple

from ..core.records import MAX_ANALYSIS_LENGTH, EmotionCategory
from .interfaces import Classification, ClassificationError, ClassificationService

_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL | re.IGNORECASE)


def strip_code_fence(raw: str) -> str:
    """Remove a surrounding ``` or ```json fence, if any."""
    match = _FENCE.match(raw)
    return match.group(1) if match else raw.strip()


def validate_classification(data: Any) -> Classification:
    """
    Validate a decoded classifier response.

    Raises:
        ClassificationError: If any field is missing or out of range
    """
    if not isinstance(data, dict):
        raise ClassificationError('malformed', "response is not a JSON object")

    category = data.get('category')
    try:
        parsed_category = EmotionCategory(category)
    except ValueError:
        raise ClassificationError('invalid_category', f"unknown category {category!r}")

    strength = data.get('strength')
    if isinstance(strength, bool) or not isinstance(strength, (int, float)):
        raise ClassificationError('invalid_strength', f"strength must be a number, got {strength!r}")
    if not 0.0 <= strength <= 1.0:
        raise ClassificationError('invalid_strength', f"strength out of range: {strength}")

    annotation = data.get('analysis', data.get('annotation'))
    if not isinstance(annotation, str) or not annotation.strip():
        raise ClassificationError('invalid_annotation', "annotation must be a non-empty string")
    annotation = annotation.strip()
    if len(annotation) > MAX_ANALYSIS_LENGTH:
        raise ClassificationError(
            'invalid_annotation',
            f"annotation longer than {MAX_ANALYSIS_LENGTH} characters"
        )

    return Classification(category=parsed_category, strength=float(strength), annotation=annotation)


def parse_classification(raw: str) -> Classification:
    """
    Parse a raw classifier response.

    Example:
        >>> parse_classification('```json\\n{"category": "joy", "strength": 0.8, "analysis": "bright"}\\n```')
        Classification(category=<EmotionCategory.JOY: 'joy'>, strength=0.8, annotation='bright')
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ClassificationError('malformed', "empty response")
    try:
        data = json.loads(strip_code_fence(raw))
    except json.JSONDecodeError as e:
        raise ClassificationError('malformed', f"invalid JSON: {e}")
    return validate_classification(data)


class ResponseClassifier(ClassificationService):
    """
    Classifier built on a text transport (prompt in, raw response out).

    Transport exceptions surface as ``ClassificationError('transport')``.
    """

    def __init__(self, transport: Callable[[str], str]):
        self.transport = transport

    def classify(self, text: str) -> Classification:
        if not isinstance(text, str) or not text.strip():
            raise ClassificationError('empty_message', "message is empty")
        try:
            raw = self.transport(text)
        except ClassificationError:
            raise
        except Exception as e:
            raise ClassificationError('transport', str(e)) from e
        return parse_classification(raw)


# =============================================================================
# Offline transport
# =============================================================================

KEYWORDS: Dict[EmotionCategory, Tuple[str, ...]] = {
    EmotionCategory.JOY: ("happy", "glad", "great", "fun", "love", "yay"),
    EmotionCategory.PEACE: ("calm", "quiet", "rest", "relaxed", "peace"),
    EmotionCategory.STRESS: ("deadline", "stress", "busy", "angry", "tired"),
    EmotionCategory.SADNESS: ("sad", "lonely", "miss", "cry", "lost"),
    EmotionCategory.INSPIRATION: ("idea", "create", "inspired", "build", "dream"),
    EmotionCategory.NOSTALGIA: ("remember", "childhood", "old", "used to"),
    EmotionCategory.CONFUSION: ("confused", "unsure", "why", "maybe", "?"),
}


def keyword_transport(text: str) -> str:
    """
    Deterministic offline stand-in for a classifier endpoint.

    Scores categories by keyword hits and answers in the same fenced JSON
    shape a language model would.
    """
    lowered = text.lower()
    best: Optional[EmotionCategory] = None
    best_hits = 0
    for category, words in KEYWORDS.items():
        hits = sum(lowered.count(word) for word in words)
        if hits > best_hits:
            best, best_hits = category, hits
    category = best or EmotionCategory.PEACE
    strength = min(1.0, 0.4 + 0.2 * best_hits)
    words = [w for w in re.split(r"\W+", text) if w]
    annotation = (words[0] if words else category.value)[:MAX_ANALYSIS_LENGTH]
    payload = {'category': category.value, 'strength': round(strength, 2), 'analysis': annotation}
    return "```json\n" + json.dumps(payload) + "\n```"
