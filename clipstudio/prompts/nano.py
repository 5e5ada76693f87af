"""
Nano schema for dense structured image models

Adds two adherence boosters on top of the standard setup listing:
- characters are tagged "ESSENTIAL: IMAGE N" in the setup block
- every mention of a slotted character in the action prose is rewritten
  to "Name (IMAGE N)"
"""

import re
from typing import Dict, List

from ..core.state import GenerationContext, ImageManifest
from .base import (
    PromptSchema, clip_of, has_style, style_description, style_negatives, clip_negatives,
    camera_description, location_line, character_entries, reference_lines
)

STYLE_TRANSFER_PROPERTIES = (
    "Facial style, Artistic Interpretation; Material Properties & Textures; "
    "Shading, response to scene lighting; Fidelity & Quality"
)
STYLE_ASSET_PROPERTIES = (
    "Facial style, Artistic Interpretation; Material Properties & Textures; "
    "Response to scene lighting; Fidelity & Quality"
)
STYLE_FOOTER = "[OUTPUT: Render ACTION with strict adherence to STYLE REFERENCE.]"


def tag_character_mentions(text: str, characters: List[Dict]) -> str:
    """
    Append "(IMAGE N)" after each whole-word, case-insensitive mention of a
    character that holds a slot. Longer names are matched first so that
    "Ann Lee" is not tagged as "Ann".

    Names are delimited by non-word characters rather than word boundaries,
    so names with leading or trailing punctuation ("Dr. X.") still match.
    Names that differ only by case cannot be told apart in prose; the
    character with the earlier slot owns them.
    """
    slotted = {}
    tagged = [c for c in characters if c["slot"] > 0 and c["name"]]
    for character in sorted(tagged, key=lambda c: c["slot"]):
        slotted.setdefault(character["name"].lower(), character)
    if not text or not slotted:
        return text

    names = sorted(slotted, key=len, reverse=True)
    pattern = re.compile(
        r"(?<!\w)(" + "|".join(re.escape(name) for name in names) + r")(?!\w)",
        re.IGNORECASE
    )

    def _tag(match: re.Match) -> str:
        character = slotted[match.group(1).lower()]
        return f"{character['name']} (IMAGE {character['slot']})"

    return pattern.sub(_tag, text)


class NanoSchema(PromptSchema):

    name = "nano"

    def format(self, context: GenerationContext, manifest: ImageManifest) -> str:
        style_idx = manifest["slots"]["style"]
        has_style_image = 0 < style_idx <= len(manifest["selected_urls"])
        style_asset = context.get("style_asset")
        characters = character_entries(context, manifest)
        prompt = ""

        # --- Header & style ---
        if has_style_image:
            prompt += "[SYSTEM: PRIORITY RULE:\n"
            prompt += f"Image {style_idx} defines the STYLE for the OUTPUT.\n"
            prompt += f"IGNORE the subject of Image {style_idx}.\n"
            prompt += "]\n\n"

            prompt += f"STYLE: High fidelity Image {style_idx} STYLE:\n\n"
            prompt += f"[{style_description(context)}]\n"
            negatives = style_negatives(context)
            if negatives:
                prompt += f"[{negatives}]\n"
            prompt += "\n"

            prompt += (
                "[INSTRUCTION: Preserve the identity and purpose of the OUTPUT SUBJECT. "
                f"Apply the Image {style_idx} STYLE: {STYLE_TRANSFER_PROPERTIES}: to the OUTPUT SUBJECT.]\n\n"
            )

            if style_asset:
                prompt += "[SYSTEM: PRIORITY RULE:\n\n"
                prompt += "OUTPUT WITH STYLE REFERENCE:\n"
                prompt += (
                    "{if STYLE ASSET IMAGE: "
                    f"[Defined by STYLE of IMAGE {style_idx}: {STYLE_ASSET_PROPERTIES}]}}\n"
                )
                if style_asset.get("description"):
                    prompt += f"[{style_asset['description']}]\n"
                prompt += "]\n\n"
        elif has_style(context):
            prompt += f"STYLE: [{style_description(context)}]\n\n"

        # --- Setup / reference ---
        prompt += "SETUP / REFERENCE:\n[\n"

        camera = camera_description(context)
        if camera:
            prompt += f"CAMERA: [{camera}]\n\n"

        location = location_line(context, manifest)
        if location:
            prompt += f"{location}\n\n"

        for character in characters:
            line = f"CHARACTER: {character['name']}"
            if character["slot"] > 0:
                line += f": ESSENTIAL: IMAGE {character['slot']}"
            prompt += f"{line}: [{character['description']}].\n"
            if character["negatives"]:
                prompt += f"NO: [{character['negatives']}].\n"
            prompt += "\n"

        for line in reference_lines(manifest):
            prompt += f"{line}\n\n"

        prompt += "]\n\n"

        # --- Action ---
        clip = clip_of(context)
        action = clip.get("action") or ""
        if clip.get("dialog"):
            action += f"\n\n{clip['dialog']}"
        action = tag_character_mentions(action, characters)

        prompt += f"ACTION: [{action}]\n"

        negatives = clip_negatives(context)
        if negatives:
            prompt += f"NO: [{negatives}].\n"

        if has_style_image:
            prompt += f"\n{STYLE_FOOTER}"

        return prompt.rstrip("\n")
