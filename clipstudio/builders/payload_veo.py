"""
Veo payload builders

- VeoPayloadBuilder: standard multi-reference video (fast and quality tiers)
- TransitionPayloadBuilder: start-to-end frame video with a degrade ladder
  (2 frames -> transition, 1 -> reference video, 0 -> text-to-video)
"""

import logging

from ..core.config import (
    VEO_CONFIG, TEXT_2_VIDEO, REFERENCE_2_VIDEO, FIRST_AND_LAST_FRAMES_2_VIDEO
)
from ..core.state import GenerationContext, GenerationPayload
from .base import PayloadBuilder, log_warnings, normalize_aspect_ratio, parse_duration
from .constructor import construct_prompt, fallback_prompt, target_model
from .registry import ModelFamily

logger = logging.getLogger(__name__)


def resolve_veo_model(requested: str, has_images: bool) -> str:
    """
    Map the requested tier to the provider model id.

    The quality tier does not accept reference images, so it is downgraded
    to the fast tier whenever an image is attached.
    """
    if (requested or "").lower() in VEO_CONFIG["quality_ids"]:
        if not has_images:
            return VEO_CONFIG["quality_model"]
        logger.warning("[VeoPayloadBuilder] Downgrading Veo Quality to Fast: reference images require the fast model")
    return VEO_CONFIG["fast_model"]


class VeoPayloadBuilder(PayloadBuilder):

    name = "VeoPayloadBuilder"
    families = (ModelFamily.STANDARD_VIDEO,)

    def _build(self, context: GenerationContext) -> GenerationPayload:
        constructed = construct_prompt(context, family=ModelFamily.STANDARD_VIDEO)
        log_warnings(self.name, constructed["warnings"])

        image_urls = constructed["image_urls"]
        generation_type = REFERENCE_2_VIDEO if image_urls else TEXT_2_VIDEO
        model = resolve_veo_model(target_model(context), has_images=bool(image_urls))

        return self._payload(context, model, generation_type, constructed["prompt"], image_urls)

    def fallback_payload(self, context: GenerationContext) -> GenerationPayload:
        model = resolve_veo_model(target_model(context), has_images=False)
        return self._payload(context, model, TEXT_2_VIDEO, fallback_prompt(context), [])

    def _payload(self, context, model, generation_type, prompt, image_urls) -> GenerationPayload:
        clip = context.get("clip") or {}
        return {
            "model": model,
            "generationType": generation_type,
            "taskType": generation_type,
            "prompt": prompt,
            "imageUrls": list(image_urls),
            "aspectRatio": normalize_aspect_ratio(context),
            "durationType": parse_duration(
                clip.get("duration"), VEO_CONFIG["durations"], VEO_CONFIG["default_duration"]
            ),
            "enableTranslation": VEO_CONFIG["enable_translation"],
            "enableFallback": VEO_CONFIG["enable_fallback"]
        }


class TransitionPayloadBuilder(VeoPayloadBuilder):

    name = "TransitionPayloadBuilder"
    families = (ModelFamily.TRANSITION_VIDEO,)

    def _build(self, context: GenerationContext) -> GenerationPayload:
        constructed = construct_prompt(context, family=ModelFamily.TRANSITION_VIDEO)
        log_warnings(self.name, constructed["warnings"])

        image_urls = constructed["image_urls"]
        if len(image_urls) >= 2:
            generation_type = FIRST_AND_LAST_FRAMES_2_VIDEO
        elif len(image_urls) == 1:
            generation_type = REFERENCE_2_VIDEO
            logger.warning(f"[{self.name}] Start-to-end requested with 1 image. Falling back to reference video.")
        else:
            generation_type = TEXT_2_VIDEO
            logger.warning(f"[{self.name}] Start-to-end requested with 0 images. Falling back to text-to-video.")

        return self._payload(
            context, VEO_CONFIG["fast_model"], generation_type, constructed["prompt"], image_urls
        )

    def fallback_payload(self, context: GenerationContext) -> GenerationPayload:
        return self._payload(context, VEO_CONFIG["fast_model"], TEXT_2_VIDEO, fallback_prompt(context), [])
