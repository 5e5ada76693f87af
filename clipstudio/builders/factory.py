"""Maps model identifiers to payload builders"""

import logging
from typing import Optional

from ..core.state import GenerationContext, GenerationPayload
from .base import PayloadBuilder
from .constructor import target_model
from .payload_veo import VeoPayloadBuilder, TransitionPayloadBuilder
from .payload_flux import FluxPayloadBuilder
from .payload_nano import NanoPayloadBuilder
from .payload_kling import KlingPayloadBuilder
from .registry import ModelFamily, resolve_model_family

logger = logging.getLogger(__name__)

# Stateless builder instances, one per family
BUILDERS = {
    ModelFamily.STANDARD_VIDEO: VeoPayloadBuilder(),
    ModelFamily.TRANSITION_VIDEO: TransitionPayloadBuilder(),
    ModelFamily.FLAT_IMAGE: FluxPayloadBuilder(),
    ModelFamily.DENSE_IMAGE: NanoPayloadBuilder(),
    ModelFamily.SINGLE_IMAGE_VIDEO: KlingPayloadBuilder(),
}


def get_builder(model_id: Optional[str]) -> PayloadBuilder:
    """Get the builder for a model id (unknown ids use the standard video builder)"""
    family = resolve_model_family(model_id)
    return BUILDERS[family]


def build_payload(context: GenerationContext) -> GenerationPayload:
    """
    Build the provider payload for a generation context.

    Args:
        context: Generation context; the target model comes from context["model"],
            then the clip's model, then the configured default

    Returns:
        Payload dict ready for the provider HTTP client
    """
    model = target_model(context)
    builder = get_builder(model)
    logger.info(f"[BuilderFactory] Model '{model}' -> {builder.name}")
    return builder.build(context)
