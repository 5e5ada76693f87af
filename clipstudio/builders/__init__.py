"""Image selection, prompt construction and model payload builders"""

from .registry import ModelFamily, MODEL_REGISTRY, get_model_info, get_available_models, resolve_model_family
from .selector import select_images, is_valid_image_url, urls_overlap
from .constructor import construct_prompt
from .factory import get_builder, build_payload
from .resolvers import find_asset, build_generation_context

__all__ = [
    'ModelFamily',
    'MODEL_REGISTRY',
    'get_model_info',
    'get_available_models',
    'resolve_model_family',
    'select_images',
    'is_valid_image_url',
    'urls_overlap',
    'construct_prompt',
    'get_builder',
    'build_payload',
    'find_asset',
    'build_generation_context',
]
