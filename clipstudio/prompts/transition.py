"""Start-to-end transition schema"""

from ..core.state import GenerationContext, ImageManifest
from .base import PromptSchema, clip_of, clip_negatives

TRANSITION_INSTRUCTION = "[INSTRUCTION: Transitions from Start Frame (Image 1) to End Frame (Image 2).]"
SINGLE_FRAME_INSTRUCTION = "[INSTRUCTION: Use Image 1 as the reference frame for the shot.]"


class TransitionSchema(PromptSchema):

    name = "transition"

    def format(self, context: GenerationContext, manifest: ImageManifest) -> str:
        frame_count = len(manifest["selected_urls"])

        # Partial selections fall back to reference mode downstream
        if frame_count >= 2:
            parts = [TRANSITION_INSTRUCTION]
        elif frame_count == 1:
            parts = [SINGLE_FRAME_INSTRUCTION]
        else:
            parts = []

        body = f"ACTION: {clip_of(context).get('action') or ''}"
        negatives = clip_negatives(context)
        if negatives:
            body += f"\nNO: [{negatives}]"
        parts.append(body)

        return "\n\n".join(parts)
