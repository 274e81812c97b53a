"""
Parser for replies from the feedback model.

The model is asked for bare JSON but frequently wraps it in prose or markdown
code fences, and occasionally leaves a trailing comma. This module recovers the
outermost JSON block and validates it against the feedback schemas; anything
that cannot be recovered raises InvalidResponseError so the caller can fall back.
"""
import json
import re
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar
from pydantic import BaseModel, ValidationError as PydanticValidationError
from answerbank.exceptions import InvalidResponseError
from answerbank.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\s*", re.IGNORECASE)
TRAILING_COMMA_PATTERN = re.compile(r",(\s*[}\]])")

_CLOSERS = {"{": "}", "[": "]"}


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences, keeping their content."""
    return CODE_FENCE_PATTERN.sub("", text).strip()


def remove_trailing_commas(text: str) -> str:
    """Drop commas that directly precede a closing brace or bracket."""
    return TRAILING_COMMA_PATTERN.sub(r"\1", text)


def _balanced_block_from(text: str, start: int) -> Optional[str]:
    """Return the balanced block opening at text[start], or None if it never closes."""
    stack = []
    in_string = False
    escaped = False

    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in ("}", "]"):
            if not stack or stack.pop() != char:
                return None
            if not stack:
                return text[start:index + 1]
    return None


def _load_candidate(block: str) -> Tuple[Optional[str], Any]:
    """Decode a block as-is, then with trailing commas removed; (None, None) if neither parses."""
    for candidate in (block, remove_trailing_commas(block)):
        try:
            return candidate, json.loads(candidate)
        except json.JSONDecodeError:
            continue
    return None, None


def extract_json_block(text: str, expected: Optional[type] = None) -> Optional[str]:
    """
    Find the outermost balanced JSON object or array in free text.

    Candidates are tried left to right; the first balanced block that
    parses wins. When ``expected`` is given (dict or list), blocks of
    another shape are skipped, so a bracketed aside in the prose does not
    hide the real reply. Trailing commas are only stripped when the block
    does not parse as written.
    """
    for start, char in enumerate(text):
        if char not in _CLOSERS:
            continue
        block = _balanced_block_from(text, start)
        if block is None:
            continue
        candidate, value = _load_candidate(block)
        if candidate is None:
            continue
        if expected is not None and not isinstance(value, expected):
            continue
        return candidate
    return None


def parse_json_reply(raw_reply: str, expected: Optional[type] = None) -> Any:
    """Parse a model reply into a JSON value or raise InvalidResponseError."""
    if not raw_reply or not raw_reply.strip():
        raise InvalidResponseError("Feedback service returned an empty reply")

    block = extract_json_block(strip_code_fences(raw_reply), expected)
    if block is None:
        raise InvalidResponseError(
            "No JSON block found in feedback reply",
            context={"reply_preview": raw_reply[:200]},
        )
    return json.loads(block)


def validate_payload(data: Any, model: Type[T], extra: Optional[Dict[str, Any]] = None) -> T:
    """Validate a decoded JSON object as a pydantic model; ``extra`` fields are merged over it."""
    if not isinstance(data, dict):
        raise InvalidResponseError(f"Expected a JSON object for {model.__name__}, got {type(data).__name__}")

    payload = dict(data)
    payload.pop("is_fallback", None)
    if extra:
        payload.update(extra)

    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        logger.debug(f"Reply failed {model.__name__} validation: {e}")
        raise InvalidResponseError(f"Malformed {model.__name__} in feedback reply: {e.error_count()} errors")


def parse_model(raw_reply: str, model: Type[T], extra: Optional[Dict[str, Any]] = None) -> T:
    """Parse a reply into a pydantic model."""
    return validate_payload(parse_json_reply(raw_reply, dict), model, extra)


def parse_string_list(raw_reply: str) -> List[str]:
    """Parse a reply that should be a JSON array of strings."""
    # A wrapped list such as {"suggestions": [...]} is skipped as an object
    # and its inner array picked up by the scan.
    data = parse_json_reply(raw_reply, list)
    if not all(isinstance(item, str) for item in data):
        raise InvalidResponseError("Expected a JSON array of strings in feedback reply")
    return data
