"""
Pure helpers for resolving a clip against a studio library

Turns clip fields (comma-separated character names, location, style, camera)
plus a library listing into a GenerationContext with resolved assets and
candidate image pools. Names match case-insensitively and exactly.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..core.state import AssetRecord, ClipData, GenerationContext
from ..prompts.base import split_names

logger = logging.getLogger(__name__)

ASSET_KINDS = ("character", "location", "style", "camera")


def split_urls(text: Optional[str]) -> List[str]:
    """Split a comma-separated URL list, dropping blanks"""
    return split_names(text)


def find_asset(
    library: Iterable[AssetRecord],
    name: Optional[str],
    kind: Optional[str] = None
) -> Optional[AssetRecord]:
    """
    Find a library asset by exact, case-insensitive name.

    Args:
        library: Asset records for the series
        name: Name to look up
        kind: Restrict the match to one asset kind

    Returns:
        First matching record, or None
    """
    if not name or not name.strip():
        return None
    target = name.strip().lower()
    for asset in library:
        if kind and (asset.get("kind") or "").lower() != kind:
            continue
        if (asset.get("name") or "").strip().lower() == target:
            return asset
    return None


def build_generation_context(
    clip: ClipData,
    library: Iterable[AssetRecord],
    model: Optional[str] = None,
    explicit_images: Optional[List[str]] = None,
    **options: Any
) -> GenerationContext:
    """
    Resolve a clip's assets and image pools from the library.

    Args:
        clip: Clip fields
        library: Asset records for the clip's series
        model: Target model id (falls back to the clip's model downstream)
        explicit_images: User reference URLs; defaults to clip["explicit_ref_urls"]
        **options: Extra context keys (aspect_ratio, seed, style_strength, sound,
            subject/style overrides)

    Returns:
        GenerationContext ready for the payload builders
    """
    library = list(library)
    names = split_names(clip.get("character"))

    location_asset = find_asset(library, clip.get("location"), "location")
    character_assets = [find_asset(library, name, "character") for name in names]
    style_asset = find_asset(library, clip.get("style"), "style")
    camera_asset = find_asset(library, clip.get("camera"), "camera")

    if explicit_images is None:
        explicit_images = split_urls(clip.get("explicit_ref_urls"))

    context: Dict[str, Any] = {
        "clip": clip,
        "location_asset": location_asset,
        "character_assets": character_assets,
        "style_asset": style_asset,
        "camera_asset": camera_asset,
        "location_images": [location_asset["ref_image_url"]]
        if location_asset and location_asset.get("ref_image_url") else [],
        "character_images": [(asset or {}).get("ref_image_url") for asset in character_assets],
        "explicit_images": list(explicit_images),
        "style_image": (style_asset or {}).get("ref_image_url"),
    }
    if model:
        context["model"] = model
    context.update({key: value for key, value in options.items() if value is not None})

    missing = [name for name, asset in zip(names, character_assets) if asset is None]
    if missing:
        logger.info(f"[Resolver] No library record for characters: {missing}")

    return context
