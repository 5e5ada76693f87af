"""
Kling payload builder (single-image video with optional sound)

The model accepts exactly one image. An explicit upload takes priority over
library images so users can steer the shot without editing the clip's
characters or location.
"""

import logging

from ..core.config import KLING_CONFIG
from ..core.state import GenerationContext, GenerationPayload
from .base import PayloadBuilder, log_warnings, parse_duration, truncate_prompt
from .constructor import construct_prompt, fallback_prompt
from .registry import ModelFamily
from .selector import select_images, is_valid_image_url

logger = logging.getLogger(__name__)


def single_image_context(context: GenerationContext) -> GenerationContext:
    """
    Narrow the image pools so the selection yields at most one image.

    The prompt is rendered from the narrowed manifest, so slot numbers in
    the text always match the single image sent.
    """
    explicit = [url for url in (context.get("explicit_images") or []) if is_valid_image_url(url)]
    if explicit:
        if len(explicit) > 1 or context.get("location_images") or context.get("character_images"):
            logger.info(f"[KlingPayloadBuilder] Explicit priority override: using {explicit[0]}")
        return {
            **context,
            "location_images": [],
            "character_images": [],
            "style_image": None,
            "explicit_images": [explicit[0]]
        }

    manifest = select_images(context, family=ModelFamily.SINGLE_IMAGE_VIDEO)
    if manifest["counts"]["total"] <= 1:
        return context

    logger.warning(
        f"[KlingPayloadBuilder] Model requires exactly 1 image, but {manifest['counts']['total']} found. "
        "Using the first one."
    )
    first = manifest["selected_urls"][0]
    slots = manifest["slots"]
    return {
        **context,
        "location_images": [first] if slots["location"] == 1 else [],
        "character_images": [first if slot == 1 else None for slot in slots["characters"]],
        "style_image": first if slots["style"] == 1 else None,
        "explicit_images": []
    }


class KlingPayloadBuilder(PayloadBuilder):

    name = "KlingPayloadBuilder"
    families = (ModelFamily.SINGLE_IMAGE_VIDEO,)

    def _build(self, context: GenerationContext) -> GenerationPayload:
        constructed = construct_prompt(
            single_image_context(context), family=ModelFamily.SINGLE_IMAGE_VIDEO
        )
        log_warnings(self.name, constructed["warnings"])

        image_urls = constructed["image_urls"][:KLING_CONFIG["max_images"]]
        if not image_urls:
            logger.warning(f"[{self.name}] No input images found. Text-to-video fallback.")

        return self._payload(context, constructed["prompt"], image_urls)

    def fallback_payload(self, context: GenerationContext) -> GenerationPayload:
        return self._payload(context, fallback_prompt(context), [])

    def _payload(self, context, prompt, image_urls) -> GenerationPayload:
        clip = context.get("clip") or {}
        return {
            "model": KLING_CONFIG["default_model"],
            "input": {
                "prompt": truncate_prompt(prompt, KLING_CONFIG["max_prompt_chars"], self.name),
                "image_urls": list(image_urls),
                "sound": bool(context.get("sound")),
                "duration": parse_duration(
                    clip.get("duration"), KLING_CONFIG["durations"], KLING_CONFIG["default_duration"]
                )
            }
        }
