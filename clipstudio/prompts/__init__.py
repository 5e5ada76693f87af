"""Prompt schemas for generation models

Each schema renders the same image manifest into a model-specific prompt.
"""

from .base import PromptSchema
from .standard import StandardSchema
from .transition import TransitionSchema
from .legacy import LegacySchema
from .nano import NanoSchema

__all__ = [
    'PromptSchema',
    'StandardSchema',
    'TransitionSchema',
    'LegacySchema',
    'NanoSchema',
]
