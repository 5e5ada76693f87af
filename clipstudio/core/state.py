"""Data definitions for the prompt / payload construction pipeline"""

from typing import List, Dict, Any, Optional, TypedDict


class ClipData(TypedDict, total=False):
    # Descriptive fields (all free text)
    title: str
    action: str
    dialog: str
    character: str  # Comma-separated character names
    location: str
    camera: str
    style: str
    negative_prompt: str

    # Generation options
    duration: str  # "5s", "10s", "5", ...
    aspect_ratio: str
    model: str  # Legacy per-clip model; the request model takes precedence

    # Comma-separated user-attached reference URLs
    explicit_ref_urls: str


class AssetRecord(TypedDict, total=False):
    name: str
    description: str
    negatives: str
    kind: str  # "character", "location", "style" or "camera"
    ref_image_url: Optional[str]


class GenerationContext(TypedDict, total=False):
    # Subject of generation
    clip: ClipData
    model: str
    aspect_ratio: str
    seed: Optional[int]
    style_strength: int  # 1-10
    sound: bool

    # Caller overrides (studio item generation passes these explicitly)
    subject_name: str
    subject_description: str
    subject_negatives: str
    style_name: str
    style_description: str
    style_negatives: str

    # Resolved assets
    location_asset: Optional[AssetRecord]
    character_assets: List[Optional[AssetRecord]]  # Parallel to the character name list
    style_asset: Optional[AssetRecord]
    camera_asset: Optional[AssetRecord]

    # Candidate image pools (already public URLs)
    location_images: List[str]  # 0 or 1 entries
    character_images: List[Optional[str]]  # Parallel to the character name list
    explicit_images: List[str]  # User uploads, first-come priority
    style_image: Optional[str]


class ImageSlots(TypedDict):
    # 1-based positions in selected_urls, 0 = not present
    location: int
    characters: List[int]
    style: int
    references: List[int]


class ImageManifest(TypedDict):
    selected_urls: List[str]
    slots: ImageSlots
    counts: Dict[str, int]  # Diagnostics: total, chars, refs


class ConstructedPrompt(TypedDict):
    prompt: str
    image_urls: List[str]
    warnings: List[str]
    schema: str
    fallback_used: bool


GenerationPayload = Dict[str, Any]
