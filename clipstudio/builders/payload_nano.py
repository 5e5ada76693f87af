"""Nano Banana payload builder (dense structured image)"""

import logging

from ..core.config import NANO_CONFIG
from ..core.state import GenerationContext, GenerationPayload
from .base import PayloadBuilder, log_warnings, normalize_aspect_ratio, parse_seed, truncate_prompt
from .constructor import construct_prompt, fallback_prompt, target_model
from .registry import ModelFamily

logger = logging.getLogger(__name__)


def resolve_nano_model(requested: str) -> str:
    requested = (requested or "").strip()
    return requested if "nano" in requested.lower() else NANO_CONFIG["default_model"]


class NanoPayloadBuilder(PayloadBuilder):

    name = "NanoPayloadBuilder"
    families = (ModelFamily.DENSE_IMAGE,)

    def _build(self, context: GenerationContext) -> GenerationPayload:
        constructed = construct_prompt(context, family=ModelFamily.DENSE_IMAGE)
        log_warnings(self.name, constructed["warnings"])

        payload = self._payload(context, constructed["prompt"], constructed["image_urls"])
        logger.info(
            f"[{self.name}] Built: model={payload['model']}, "
            f"promptLen={len(payload['input']['prompt'])}, images={len(constructed['image_urls'])}"
        )
        return payload

    def fallback_payload(self, context: GenerationContext) -> GenerationPayload:
        return self._payload(context, fallback_prompt(context), [])

    def _payload(self, context, prompt, image_urls) -> GenerationPayload:
        payload_input = {
            "prompt": truncate_prompt(prompt, NANO_CONFIG["max_prompt_chars"], self.name, suffix="..."),
            "image_input": list(image_urls),
            "aspect_ratio": normalize_aspect_ratio(context),
            # Fixed by the platform, not user-configurable
            "resolution": NANO_CONFIG["resolution"],
            "output_format": NANO_CONFIG["output_format"]
        }
        seed = parse_seed(context.get("seed"))
        if seed is not None:
            payload_input["seed"] = seed

        return {
            "model": resolve_nano_model(target_model(context)),
            "input": payload_input
        }
