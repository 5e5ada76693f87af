"""
Standard schema for structured multi-reference video models

Block order:
1. [SYSTEM: PRIORITY RULE] (style only)
2. STYLE
3. OUTPUT SUBJECT
4. [INSTRUCTION] (style only)
5. SETUP / REFERENCE
6. ACTION + NO
7. [OUTPUT] footer (style only)
"""

from ..core.state import GenerationContext, ImageManifest
from .base import (
    PromptSchema, clip_of, has_style, style_description, style_negatives, style_strength_percent,
    clip_negatives, camera_description, location_line, character_entries, reference_lines
)

STYLE_FOOTER = "[OUTPUT: Render ACTION with strict adherence to STYLE REFERENCE.]"


class StandardSchema(PromptSchema):

    name = "standard"

    def format(self, context: GenerationContext, manifest: ImageManifest) -> str:
        slots = manifest["slots"]
        style_idx = slots["style"]
        has_style_image = style_idx > 0
        style_active = has_style(context)
        characters = character_entries(context, manifest)
        blocks = []

        # --- Style priority header ---
        if style_active:
            header = "[SYSTEM: PRIORITY RULE:\n"
            if has_style_image:
                header += f"Image {style_idx} defines the STYLE for the OUTPUT.\n"
                header += f"IGNORE the subject of Image {style_idx}.\n"
            else:
                header += "Follow the STYLE DESCRIPTION strictly.\n"
            header += "]"
            blocks.append(header)

            style_desc = style_description(context)
            style_negs = style_negatives(context)
            if has_style_image:
                style_block = f"STYLE: High fidelity Image {style_idx} STYLE:\n\n[{style_desc}]"
            else:
                style_block = f"STYLE:\n\n[{style_desc}]"
            if style_negs:
                style_block += f"\n[{style_negs}]"
            blocks.append(style_block)

        # --- Output subject summary ---
        subject_indices = [slots["location"]] + slots["characters"] + slots["references"]
        subject_indices = [idx for idx in subject_indices if idx > 0]

        location_asset = context.get("location_asset") or {}
        subject_names = []
        subject_negs = []
        if location_asset.get("name"):
            subject_names.append(f"Location: {location_asset['name']}")
        if location_asset.get("negatives"):
            subject_negs.append(location_asset["negatives"])
        for character in characters:
            subject_names.append(f"Character: {character['name']}")
            if character["negatives"]:
                subject_negs.append(character["negatives"])

        subject_block = "OUTPUT SUBJECT:"
        if subject_indices:
            subject_block += "\nSUBJECT IMAGES: [" + ", ".join(f"IMAGE {i}" for i in subject_indices) + "]"
        if subject_names:
            subject_block += "\n[" + ". ".join(subject_names) + "]"
        if subject_negs:
            subject_block += "\n[" + ". ".join(subject_negs) + "]"
        blocks.append(subject_block)

        # --- Style instruction ---
        if style_active:
            instruction = "[INSTRUCTION: Preserve the identity and purpose of the OUTPUT SUBJECT. "
            if has_style_image:
                strength = style_strength_percent(context)
                instruction += (
                    f"Apply the Image {style_idx} STYLE: Facial style: {strength}%, "
                    "Artistic Interpretation; Material Properties & Textures; "
                    "Shading, response to scene lighting; Fidelity & Quality: to the OUTPUT SUBJECT.]"
                )
                instruction += (
                    "\n\n[SYSTEM: PRIORITY RULE:\n\nOUTPUT WITH STYLE REFERENCE:\n"
                    f"[Defined by STYLE of IMAGE {style_idx}: Facial style: {strength}%, "
                    "Artistic Interpretation; Material Properties & Textures; "
                    "Response to scene lighting; Fidelity & Quality]\n"
                    f"[{style_description(context)}]\n]"
                )
            else:
                instruction += "Apply the defined STYLE properties to the OUTPUT SUBJECT.]"
            blocks.append(instruction)

        # --- Setup / reference ---
        setup_lines = []
        camera = camera_description(context)
        if camera:
            setup_lines.append(f"CAMERA: [{camera}]")

        location = location_line(context, manifest)
        if location:
            setup_lines.append(location)

        for character in characters:
            tag = f"IMAGE {character['slot']}: " if character["slot"] > 0 else ""
            line = f"CHARACTER: {character['name']}: {tag}[{character['description']}]."
            if character["negatives"]:
                line += f"\nNO: [{character['negatives']}]"
            setup_lines.append(line)

        setup_lines.extend(reference_lines(manifest))

        if setup_lines:
            blocks.append("SETUP / REFERENCE:\n[\n" + "\n\n".join(setup_lines) + "\n]")

        # --- Action ---
        clip = clip_of(context)
        action = f"ACTION: [{clip.get('action') or ''}]."
        if clip.get("dialog"):
            action += f" [Character says: \"{clip['dialog']}\"]"
        blocks.append(action)

        negatives = clip_negatives(context)
        if negatives:
            blocks.append(f"NO: [{negatives}].")

        if style_active:
            blocks.append(STYLE_FOOTER)

        return "\n\n".join(blocks)
