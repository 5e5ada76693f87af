"""Flat two-sentence schema for models that reward density over structure"""

from ..core.state import GenerationContext, ImageManifest
from .base import PromptSchema, style_description, subject_description


class LegacySchema(PromptSchema):

    name = "legacy"

    def format(self, context: GenerationContext, manifest: ImageManifest) -> str:
        style = style_description(context).strip().rstrip(".")
        subject = subject_description(context).rstrip(".")
        if not subject:
            return f"{style}."

        return f"{style}. {subject}."
