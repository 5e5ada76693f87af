"""
Central registry for generation models

Single source of truth for:
- UI model ids and their display metadata
- Model family resolution (which schema and payload builder apply)
- Internal provider model ids
"""

import logging
from enum import Enum
from typing import Dict, Any, List, Optional

from ..core.config import DEFAULT_MODEL, VEO_CONFIG

logger = logging.getLogger(__name__)


class ModelFamily(Enum):
    """Downstream model families; each has its own prompt shape and payload"""
    STANDARD_VIDEO = "veo"
    TRANSITION_VIDEO = "veo_s2e"
    FLAT_IMAGE = "flux"
    DENSE_IMAGE = "nano"
    SINGLE_IMAGE_VIDEO = "kling"


# ==============================================================================
# MODEL REGISTRY
# ==============================================================================

MODEL_REGISTRY = {
    "veo-fast": {
        "label": "Veo Fast",
        "family": ModelFamily.STANDARD_VIDEO,
        "internal_id": "veo3_fast",
        "is_image": False,
        "has_audio": False,
        "description": "Fast video generation"
    },
    "veo-quality": {
        "label": "Veo Quality",
        "family": ModelFamily.STANDARD_VIDEO,
        "internal_id": "veo3",  # Downgraded to veo3_fast when images are attached
        "is_image": False,
        "has_audio": False,
        "description": "High quality video generation"
    },
    "veo-s2e": {
        "label": "Veo Start 2 End",
        "family": ModelFamily.TRANSITION_VIDEO,
        "internal_id": "veo3_fast",
        "is_image": False,
        "has_audio": False,
        "description": "Generate video transition between two images"
    },
    "kling-2.6": {
        "label": "Kling 2.6",
        "family": ModelFamily.SINGLE_IMAGE_VIDEO,
        "internal_id": "kling-2.6/image-to-video",
        "is_image": False,
        "has_audio": True,
        "description": "Kling audio-visual generation"
    },
    "flux-pro": {
        "label": "Flux Pro",
        "family": ModelFamily.FLAT_IMAGE,
        "internal_id": "flux-2/flex-image-to-image",
        "is_image": True,
        "has_audio": False,
        "description": "Pro quality image generation"
    },
    "flux-flex": {
        "label": "Flux Flex",
        "family": ModelFamily.FLAT_IMAGE,
        "internal_id": "flux-2/flex-image-to-image",
        "is_image": True,
        "has_audio": False,
        "description": "Flexible image generation"
    },
    "nano-banana-pro": {
        "label": "Nano Banana Pro",
        "family": ModelFamily.DENSE_IMAGE,
        "internal_id": "nano-banana-pro",
        "is_image": True,
        "has_audio": False,
        "description": "Structured multi-reference image generation"
    }
}


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================

def get_model_info(model_id: str) -> Optional[Dict[str, Any]]:
    """Get registry entry for a UI model id"""
    return MODEL_REGISTRY.get(model_id)


def get_available_models() -> List[str]:
    """Get list of registered UI model ids"""
    return list(MODEL_REGISTRY.keys())


def resolve_model_family(model_id: Optional[str]) -> ModelFamily:
    """
    Resolve a model identifier to its family

    Registered ids resolve through the registry. Unregistered ids (internal
    provider ids, legacy aliases) are matched by marker substrings. Anything
    unrecognised is treated as the standard video family.

    Args:
        model_id: UI or provider model identifier (case-insensitive)

    Returns:
        ModelFamily for the identifier
    """
    model = (model_id or DEFAULT_MODEL).strip().lower()

    info = MODEL_REGISTRY.get(model)
    if info:
        return info["family"]

    if model in VEO_CONFIG["transition_ids"]:
        return ModelFamily.TRANSITION_VIDEO
    if "flux" in model:
        return ModelFamily.FLAT_IMAGE
    if "nano" in model or "banana" in model:
        return ModelFamily.DENSE_IMAGE
    if "kling" in model:
        return ModelFamily.SINGLE_IMAGE_VIDEO
    if not model.startswith("veo"):
        logger.warning(f"[Registry] Unknown model '{model_id}', using standard video family")
    return ModelFamily.STANDARD_VIDEO
