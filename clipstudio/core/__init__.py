"""Core system components"""

from .state import (
    ClipData,
    AssetRecord,
    GenerationContext,
    ImageSlots,
    ImageManifest,
    ConstructedPrompt,
)
from .errors import ClipStudioError, ContractViolationError

__all__ = [
    'ClipData',
    'AssetRecord',
    'GenerationContext',
    'ImageSlots',
    'ImageManifest',
    'ConstructedPrompt',
    'ClipStudioError',
    'ContractViolationError',
]
