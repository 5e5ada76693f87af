"""
Prompt construction orchestrator

Coordinates selection (which images, which slots) and presentation (which
schema renders the text). The model family is resolved once and drives both.
"""

import logging
from typing import Optional

from ..core.config import DEFAULT_MODEL
from ..core.state import GenerationContext, ConstructedPrompt
from ..prompts import PromptSchema, StandardSchema, TransitionSchema, LegacySchema, NanoSchema
from ..prompts.base import subject_description
from .registry import ModelFamily, resolve_model_family
from .selector import select_images

logger = logging.getLogger(__name__)

FALLBACK_PROMPT = "Error building prompt."

# Stateless schema instances shared by every request
SCHEMA_REGISTRY = {
    ModelFamily.STANDARD_VIDEO: StandardSchema(),
    ModelFamily.TRANSITION_VIDEO: TransitionSchema(),
    ModelFamily.FLAT_IMAGE: LegacySchema(),
    ModelFamily.DENSE_IMAGE: NanoSchema(),
    ModelFamily.SINGLE_IMAGE_VIDEO: StandardSchema(),
}


def target_model(context: GenerationContext) -> str:
    """Request model first, then the clip's legacy model, then the default"""
    clip = context.get("clip") or {}
    return context.get("model") or clip.get("model") or DEFAULT_MODEL


def get_schema(family: ModelFamily) -> PromptSchema:
    return SCHEMA_REGISTRY.get(family, SCHEMA_REGISTRY[ModelFamily.STANDARD_VIDEO])


def fallback_prompt(context: GenerationContext) -> str:
    """Minimal prompt used when a schema fails to render"""
    try:
        subject = subject_description(context)
    except (AttributeError, TypeError):
        subject = ""
    return subject or FALLBACK_PROMPT


def construct_prompt(context: GenerationContext, family: Optional[ModelFamily] = None) -> ConstructedPrompt:
    """
    Build the prompt text and image list for a generation context.

    Args:
        context: Generation context (clip, assets, image pools, options)
        family: Pre-resolved model family (resolved from the context if omitted)

    Returns:
        ConstructedPrompt with prompt, image_urls (the manifest selection),
        warnings and whether the fallback prompt was used

    Raises:
        ContractViolationError: If the image pools are malformed
    """
    model = target_model(context)
    if family is None:
        family = resolve_model_family(model)
    warnings = []

    # 1. Selection
    manifest = select_images(context, family=family)

    # 2. Presentation
    schema = get_schema(family)
    fallback_used = False
    try:
        prompt = schema.format(context, manifest)
    except Exception as e:
        logger.error(f"[PromptConstructor] Schema '{schema.name}' failed: {str(e)}")
        warnings.append(f"Schema Error: {e}")
        prompt = fallback_prompt(context)
        fallback_used = True

    logger.info(
        f"[PromptConstructor] Model={model} -> Schema={schema.name}. "
        f"Selected Images={manifest['counts']['total']}"
    )

    return {
        "prompt": prompt,
        "image_urls": manifest["selected_urls"],
        "warnings": warnings,
        "schema": schema.name,
        "fallback_used": fallback_used
    }
