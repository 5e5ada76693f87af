"""Flux payload builder (flat text-to-image / image-to-image)"""

import logging
from typing import Any

from ..core.config import FLUX_CONFIG, DEFAULT_STYLE_STRENGTH
from ..core.state import GenerationContext, GenerationPayload
from ..prompts.base import clamp_style_strength
from .base import PayloadBuilder, log_warnings, normalize_aspect_ratio, parse_seed
from .constructor import construct_prompt, fallback_prompt, target_model
from .registry import ModelFamily, get_model_info

logger = logging.getLogger(__name__)


def compute_guidance(style_strength: Any) -> float:
    """
    Map the UI style strength (1-10) onto the provider guidance range.

    guidance = 1.5 + (strength - 1) * (8.5 / 9), rounded to one decimal,
    so 1 -> 1.5 and 10 -> 10.0.
    """
    strength = clamp_style_strength(style_strength)
    span = FLUX_CONFIG["guidance_max"] - FLUX_CONFIG["guidance_min"]
    return round(FLUX_CONFIG["guidance_min"] + (strength - 1) * (span / 9), 1)


def resolve_flux_model(requested: str) -> str:
    """UI ids and legacy aliases map to the default provider model; full provider paths pass through"""
    requested = (requested or "").strip()
    info = get_model_info(requested)
    if info:
        return info["internal_id"]
    if "/" in requested and "flux" in requested.lower():
        return requested
    return FLUX_CONFIG["default_model"]


class FluxPayloadBuilder(PayloadBuilder):

    name = "FluxPayloadBuilder"
    families = (ModelFamily.FLAT_IMAGE,)

    def _build(self, context: GenerationContext) -> GenerationPayload:
        constructed = construct_prompt(context, family=ModelFamily.FLAT_IMAGE)
        log_warnings(self.name, constructed["warnings"])

        payload = self._payload(context, constructed["prompt"], constructed["image_urls"])

        logger.info(
            f"[{self.name}] Config: guidance={payload['input']['guidance']}, "
            f"steps={payload['input']['num_inference_steps']}, "
            f"seed={payload['input'].get('seed', 'RANDOM')}, images={len(constructed['image_urls'])}"
        )
        return payload

    def fallback_payload(self, context: GenerationContext) -> GenerationPayload:
        return self._payload(context, fallback_prompt(context), [])

    def _payload(self, context, prompt, image_urls) -> GenerationPayload:
        seed = parse_seed(context.get("seed"))
        strength = context.get("style_strength", DEFAULT_STYLE_STRENGTH)

        payload_input = {
            "prompt": prompt,
            "aspect_ratio": normalize_aspect_ratio(context),
            "resolution": FLUX_CONFIG["resolution"],
            "safety_tolerance": FLUX_CONFIG["safety_tolerance"],
            "guidance": compute_guidance(strength),
            "num_inference_steps": FLUX_CONFIG["num_inference_steps"]
        }
        # Provider accepts either parameter name, send both
        if seed is not None:
            payload_input["seed"] = seed
            payload_input["random_seed"] = seed
        if image_urls:
            payload_input["input_urls"] = list(image_urls)

        payload = {
            "model": resolve_flux_model(target_model(context)),
            "input": payload_input
        }
        if seed is not None:
            payload["seed"] = seed
        return payload
