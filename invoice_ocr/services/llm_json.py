"""
Classification of generative-parser payloads.

A payload is accepted if it is already a JSON object (a dict) or a string
that strictly parses to one. Everything else is an ``InvalidLlmJson``.
"""

import json

from loguru import logger

from ..core.errors import InvalidLlmJson


def _reject_constant(name: str):
    # json.loads would otherwise accept NaN, Infinity and -Infinity
    raise ValueError(f"non-standard JSON constant {name!r}")


def _parse_int(token: str):
    # Past the int digit limit the value degrades to inf, which the
    # number normalizer turns into 0
    try:
        return int(token)
    except ValueError:
        return float(token)


def load_llm_payload(raw) -> dict:
    if isinstance(raw, dict):
        return raw

    if not isinstance(raw, str):
        logger.warning("Rejected generative payload", payload_type=type(raw).__name__)
        raise InvalidLlmJson(f"Expected a JSON object or string, got {type(raw).__name__}")

    try:
        parsed = json.loads(raw, parse_constant=_reject_constant, parse_int=_parse_int)
    except (ValueError, RecursionError) as e:
        logger.warning("Generative payload is not valid JSON", error=str(e), length=len(raw))
        raise InvalidLlmJson("Generative parser returned invalid JSON", detail=str(e)) from e

    if not isinstance(parsed, dict):
        raise InvalidLlmJson(
            "Generative parser returned JSON that is not an object",
            detail=f"top-level value is {type(parsed).__name__}",
        )
    return parsed
