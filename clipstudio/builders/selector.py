"""
Image selection for generation requests

Chooses which candidate image URLs (at most 3) are sent to the downstream
model and assigns each a stable 1-based slot, recording which logical role
(location, character N, style, generic reference) claimed it. The prompt
schemas reference these slot numbers, so the image array and the prompt text
are always built from the same manifest.

Selection is a fold over an explicit SelectionState: every step takes a
state and returns a new one.
"""

import logging
from typing import Callable, Dict, Any, List, Optional, Tuple, TypedDict

from ..core.config import (
    MAX_REFERENCE_IMAGES, TRANSITION_FRAME_COUNT, MIN_IMAGE_URL_LENGTH, INVALID_URL_LITERALS
)
from ..core.errors import ContractViolationError
from ..core.state import GenerationContext, ImageManifest
from ..prompts.base import split_names
from .registry import ModelFamily, resolve_model_family

logger = logging.getLogger(__name__)

LinkMatcher = Callable[[str, str], bool]


class SelectionState(TypedDict):
    capacity: int  # Slots available to non-style roles
    selected: Tuple[str, ...]
    location: int
    characters: Tuple[int, ...]
    style: int
    references: Tuple[int, ...]


def is_valid_image_url(url: Any) -> bool:
    """Reject empty, stringified-null and too-short URLs from upstream"""
    return (
        isinstance(url, str)
        and len(url) > MIN_IMAGE_URL_LENGTH
        and url not in INVALID_URL_LITERALS
    )


def urls_overlap(asset_url: str, candidate_url: str) -> bool:
    """Default smart-linkage rule: either URL contains the other"""
    return asset_url in candidate_url or candidate_url in asset_url


def _as_list(context: GenerationContext, key: str) -> List[Any]:
    """Read a pool from the context, enforcing list shape"""
    value = context.get(key)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ContractViolationError(
            f"'{key}' must be a list, got {type(value).__name__}"
        )
    return list(value)


def _style_image(context: GenerationContext) -> Optional[str]:
    value = context.get("style_image")
    if value is not None and not isinstance(value, str):
        raise ContractViolationError(
            f"'style_image' must be a string or None, got {type(value).__name__}"
        )
    return value


# ==============================================================================
# SELECTION STEPS
# ==============================================================================

def initial_state(num_characters: int, style_active: bool) -> SelectionState:
    """Empty selection; one slot is reserved up front when a style image is active"""
    return SelectionState(
        capacity=MAX_REFERENCE_IMAGES - 1 if style_active else MAX_REFERENCE_IMAGES,
        selected=(),
        location=0,
        characters=(0,) * num_characters,
        style=0,
        references=(),
    )


def _claim(state: SelectionState, url: Optional[str], reserved: bool = False) -> Tuple[SelectionState, int]:
    """
    Append a URL to the selection.

    Returns the new state and the URL's 1-based slot, or the unchanged state
    and 0 when the URL is invalid, already selected or out of capacity.
    Reserved claims (style) do not draw from the shared capacity.
    """
    if not is_valid_image_url(url) or url in state["selected"]:
        return state, 0
    if not reserved and state["capacity"] <= 0:
        return state, 0

    new_state = dict(state)
    new_state["selected"] = state["selected"] + (url,)
    if not reserved:
        new_state["capacity"] = state["capacity"] - 1
    return SelectionState(**new_state), len(new_state["selected"])


def select_location(state: SelectionState, location_images: List[str]) -> SelectionState:
    """Location always gets first pick"""
    if not location_images:
        return state
    state, slot = _claim(state, location_images[0])
    return SelectionState(**{**state, "location": slot})


def select_characters(
    state: SelectionState,
    character_images: List[Optional[str]],
    character_assets: List[Optional[Dict[str, Any]]],
    explicit_images: List[str],
    link_matcher: LinkMatcher = urls_overlap
) -> SelectionState:
    """
    Characters claim slots in list order while capacity remains.

    A character without a direct image is linked to an explicit upload whose
    URL matches the character asset's reference URL (smart linkage).
    """
    slots = list(state["characters"])
    for i in range(len(slots)):
        if state["capacity"] <= 0:
            break

        url = character_images[i] if i < len(character_images) else None
        if not is_valid_image_url(url):
            url = _linked_explicit_image(
                character_assets[i] if i < len(character_assets) else None,
                explicit_images,
                link_matcher
            )
        if not url:
            continue

        state, slots[i] = _claim(state, url)
    return SelectionState(**{**state, "characters": tuple(slots)})


def _linked_explicit_image(
    asset: Optional[Dict[str, Any]],
    explicit_images: List[str],
    link_matcher: LinkMatcher
) -> Optional[str]:
    asset_url = (asset or {}).get("ref_image_url")
    if not is_valid_image_url(asset_url):
        return None
    for candidate in explicit_images:
        if is_valid_image_url(candidate) and link_matcher(asset_url, candidate):
            logger.debug(f"[Selector] Linked '{asset.get('name')}' to explicit image {candidate}")
            return candidate
    return None


def select_references(state: SelectionState, explicit_images: List[str]) -> SelectionState:
    """Explicit uploads not claimed by a character fill the remaining capacity"""
    references = list(state["references"])
    for url in explicit_images:
        if state["capacity"] <= 0:
            break
        if url in state["selected"]:
            continue  # Already claimed (smart linkage or duplicate upload)
        state, slot = _claim(state, url)
        if slot:
            references.append(slot)
    return SelectionState(**{**state, "references": tuple(references)})


def select_style(state: SelectionState, style_image: Optional[str]) -> SelectionState:
    """Style takes the slot reserved for it, always last"""
    if not is_valid_image_url(style_image):
        return state
    state, slot = _claim(state, style_image, reserved=True)
    return SelectionState(**{**state, "style": slot})


def to_manifest(state: SelectionState) -> ImageManifest:
    characters = list(state["characters"])
    references = list(state["references"])
    return {
        "selected_urls": list(state["selected"]),
        "slots": {
            "location": state["location"],
            "characters": characters,
            "style": state["style"],
            "references": references
        },
        "counts": {
            "total": len(state["selected"]),
            "chars": sum(1 for slot in characters if slot > 0),
            "refs": len(references)
        }
    }


# ==============================================================================
# ENTRY POINT
# ==============================================================================

def select_images(
    context: GenerationContext,
    family: Optional[ModelFamily] = None,
    link_matcher: LinkMatcher = urls_overlap
) -> ImageManifest:
    """
    Build the image manifest for a generation context.

    Args:
        context: Generation context with candidate image pools
        family: Pre-resolved model family (resolved from context model if omitted)
        link_matcher: Rule deciding whether an explicit upload is a character's image

    Returns:
        ImageManifest with selected URLs and per-role slots

    Raises:
        ContractViolationError: If a pool has the wrong shape
    """
    if family is None:
        family = resolve_model_family(context.get("model") or (context.get("clip") or {}).get("model"))

    location_images = _as_list(context, "location_images")
    character_images = _as_list(context, "character_images")
    character_assets = _as_list(context, "character_assets")
    explicit_images = _as_list(context, "explicit_images")
    style_image = _style_image(context)

    if family is ModelFamily.TRANSITION_VIDEO:
        return _select_transition_frames(explicit_images)

    names = split_names((context.get("clip") or {}).get("character"))
    num_characters = max(len(names), len(character_images), len(character_assets))

    state = initial_state(num_characters, style_active=is_valid_image_url(style_image))
    state = select_location(state, location_images)
    state = select_characters(state, character_images, character_assets, explicit_images, link_matcher)
    state = select_references(state, explicit_images)
    state = select_style(state, style_image)

    manifest = to_manifest(state)
    logger.debug(
        f"[Selector] Selected {manifest['counts']['total']} images: "
        f"loc={manifest['slots']['location']}, chars={manifest['slots']['characters']}, "
        f"refs={manifest['slots']['references']}, style={manifest['slots']['style']}"
    )
    return manifest


def _select_transition_frames(explicit_images: List[str]) -> ImageManifest:
    """Start frame = first explicit image, end frame = second"""
    frames = [url for url in explicit_images if is_valid_image_url(url)][:TRANSITION_FRAME_COUNT]
    if len(frames) < TRANSITION_FRAME_COUNT:
        logger.info(f"[Selector] Transition requested with {len(frames)} frame(s)")

    state = initial_state(0, style_active=False)
    state = SelectionState(**{
        **state,
        "selected": tuple(frames),
        "references": tuple(range(1, len(frames) + 1))
    })
    return to_manifest(state)
