"""Shared helpers for prompt schemas"""

from typing import Dict, Any, List, Optional

from ..core.config import (
    DEFAULT_STYLE_STRENGTH, MIN_STYLE_STRENGTH, MAX_STYLE_STRENGTH, DEFAULT_STYLE_NAME
)
from ..core.state import GenerationContext, ImageManifest


class PromptSchema:
    """
    Strategy interface for formatting the final text prompt.

    Schemas are stateless; one instance is shared by every request.
    """

    name = "base"

    def format(self, context: GenerationContext, manifest: ImageManifest) -> str:
        raise NotImplementedError


def clip_of(context: GenerationContext) -> Dict[str, Any]:
    return context.get("clip") or {}


def split_names(text: Optional[str]) -> List[str]:
    """Split a comma-separated list, dropping blanks"""
    if not text:
        return []
    return [name.strip() for name in text.split(",") if name.strip()]


def clamp_style_strength(value: Any) -> float:
    """Clamp the UI style strength into the 1-10 range"""
    try:
        strength = float(value)
    except (TypeError, ValueError):
        return float(DEFAULT_STYLE_STRENGTH)
    return max(float(MIN_STYLE_STRENGTH), min(float(MAX_STYLE_STRENGTH), strength))


def style_strength_percent(context: GenerationContext) -> int:
    """Style strength 1-10 mapped to 110%-200%"""
    strength = clamp_style_strength(context.get("style_strength", DEFAULT_STYLE_STRENGTH))
    return round(strength * 10) + 100


def clip_style(context: GenerationContext) -> str:
    """Free-text style typed on the clip (used when no library record matched)"""
    return (clip_of(context).get("style") or "").strip()


def has_style(context: GenerationContext) -> bool:
    return bool(
        context.get("style_asset")
        or context.get("style_name")
        or context.get("style_description")
        or clip_style(context)
    )


def style_description(context: GenerationContext, fallback: str = DEFAULT_STYLE_NAME) -> str:
    style_asset = context.get("style_asset") or {}
    return (
        style_asset.get("description")
        or context.get("style_description")
        or context.get("style_name")
        or clip_style(context)
        or fallback
    )


def style_negatives(context: GenerationContext) -> str:
    style_asset = context.get("style_asset") or {}
    return style_asset.get("negatives") or context.get("style_negatives") or ""


def subject_description(context: GenerationContext) -> str:
    """
    Bare subject text for flat prompts and fallbacks.

    Uses the caller-provided subject description when present, otherwise
    composes "{characters} {action} at {location}" from the clip.
    """
    if context.get("subject_description"):
        return context["subject_description"].strip()

    clip = clip_of(context)
    parts = [
        ", ".join(split_names(clip.get("character"))),
        (clip.get("action") or "").strip().rstrip("."),
    ]
    text = " ".join(part for part in parts if part)
    location = (clip.get("location") or "").strip()
    if location:
        text = f"{text} at {location}" if text else f"At {location}"
    return text


def clip_negatives(context: GenerationContext) -> str:
    return clip_of(context).get("negative_prompt") or context.get("subject_negatives") or ""


def camera_description(context: GenerationContext) -> str:
    camera_asset = context.get("camera_asset") or {}
    return camera_asset.get("description") or clip_of(context).get("camera") or ""


def location_line(context: GenerationContext, manifest: ImageManifest) -> Optional[str]:
    """LOCATION: {name}: IMAGE {slot}: [{description}]. with optional NO: line"""
    asset = context.get("location_asset") or {}
    name = asset.get("name") or clip_of(context).get("location")
    if not name:
        return None

    slot = manifest["slots"]["location"]
    tag = f"IMAGE {slot}: " if slot > 0 else ""
    line = f"LOCATION: {name}: {tag}[{asset.get('description') or name}]."
    if asset.get("negatives"):
        line += f"\nNO: [{asset['negatives']}]"
    return line


def character_entries(context: GenerationContext, manifest: ImageManifest) -> List[Dict[str, Any]]:
    """
    One entry per character: name, description, negatives and slot.

    Walks the longest of the asset list, the clip's name list and the slot
    list so characters without a library record are still described by name.
    """
    assets = context.get("character_assets") or []
    names = split_names(clip_of(context).get("character"))
    slots = manifest["slots"]["characters"]

    entries = []
    for i in range(max(len(assets), len(names), len(slots))):
        asset = (assets[i] if i < len(assets) else None) or {}
        name = asset.get("name") or (names[i] if i < len(names) else None) or f"Character {i + 1}"
        entries.append({
            "name": name,
            "description": asset.get("description") or name,
            "negatives": asset.get("negatives") or "",
            "slot": slots[i] if i < len(slots) else 0
        })
    return entries


def reference_lines(manifest: ImageManifest) -> List[str]:
    return [
        f"REF IMAGE {n}: IMAGE {slot}: [Additional Reference]."
        for n, slot in enumerate(manifest["slots"]["references"], start=1)
    ]
