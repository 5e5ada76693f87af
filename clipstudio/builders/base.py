"""Base class and shared helpers for model payload builders"""

import re
import logging
from typing import Any, List, Optional, Tuple

from ..core.config import ASPECT_RATIOS, DEFAULT_ASPECT_RATIO
from ..core.errors import ContractViolationError
from ..core.state import GenerationContext, GenerationPayload
from .registry import ModelFamily, resolve_model_family

logger = logging.getLogger(__name__)

_ASPECT_RATIO_PATTERN = re.compile(r"^\d+:\d+$")


class PayloadBuilder:
    """
    Builds the provider payload for one model family.

    build() never raises for degradable conditions: any failure other than a
    contract violation is logged and replaced by a text-only payload so the
    generation is still attempted.
    """

    name = "base"
    families: Tuple[ModelFamily, ...] = ()

    def supports(self, model_id: str) -> bool:
        return resolve_model_family(model_id) in self.families

    def build(self, context: GenerationContext) -> GenerationPayload:
        try:
            return self._build(context)
        except ContractViolationError:
            raise
        except Exception as e:
            logger.error(f"[{self.name}] Payload build failed, using text-only payload: {str(e)}")
            return self.fallback_payload(context)

    def _build(self, context: GenerationContext) -> GenerationPayload:
        raise NotImplementedError

    def fallback_payload(self, context: GenerationContext) -> GenerationPayload:
        raise NotImplementedError


def log_warnings(builder_name: str, warnings: List[str]):
    if warnings:
        logger.warning(f"[{builder_name}] Warnings: {warnings}")


def normalize_aspect_ratio(context: GenerationContext) -> str:
    """
    Resolve the aspect ratio from the request or the clip.

    Accepts preset names ("vertical", "horizontal", ...) and W:H strings;
    anything else falls back to the default.
    """
    clip = context.get("clip") or {}
    value = (context.get("aspect_ratio") or clip.get("aspect_ratio") or "").strip().lower()
    if not value:
        return DEFAULT_ASPECT_RATIO
    if value in ASPECT_RATIOS:
        return ASPECT_RATIOS[value]
    if _ASPECT_RATIO_PATTERN.match(value):
        return value
    logger.warning(f"[PayloadBuilder] Unknown aspect ratio '{value}', using {DEFAULT_ASPECT_RATIO}")
    return DEFAULT_ASPECT_RATIO


def parse_duration(value: Any, allowed: List[str], default: str) -> str:
    """
    Snap a UI duration ("5s", "10 s", "10") to an allowed value.

    Args:
        value: Raw duration from the clip
        allowed: Allowed platform values as digit strings
        default: Value used for anything not allowed

    Returns:
        Duration digit string
    """
    digits = re.sub(r"[^0-9]", "", str(value or ""))
    return digits if digits in allowed else default


def parse_seed(value: Any) -> Optional[int]:
    """Seeds arrive as strings or ints from the UI; blanks mean random"""
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning(f"[PayloadBuilder] Ignoring non-numeric seed '{value}'")
        return None


def truncate_prompt(prompt: str, limit: int, builder_name: str, suffix: str = "") -> str:
    """
    Cut a prompt to the provider's character limit.

    Args:
        prompt: Rendered prompt
        limit: Maximum length, suffix included
        builder_name: Builder reported in the warning
        suffix: Marker appended to a cut prompt (e.g. "...")

    Returns:
        The prompt, unchanged when it fits
    """
    if len(prompt) <= limit:
        return prompt
    logger.warning(f"[{builder_name}] Prompt too long ({len(prompt)} chars). Truncating to {limit}.")
    return prompt[:limit - len(suffix)] + suffix
