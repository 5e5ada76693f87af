"""Type definitions for API request/response validation"""

from pydantic import BaseModel, Field
from typing import Dict, Any, Optional, List, Union
from datetime import datetime

from ..builders.resolvers import build_generation_context
from ..core.state import GenerationContext


class ClipModel(BaseModel):
    """Clip fields used for prompt construction"""
    title: Optional[str] = None
    action: Optional[str] = None
    dialog: Optional[str] = None
    character: Optional[str] = None
    location: Optional[str] = None
    camera: Optional[str] = None
    style: Optional[str] = None
    negative_prompt: Optional[str] = None
    duration: Optional[str] = None
    aspect_ratio: Optional[str] = None
    model: Optional[str] = None
    explicit_ref_urls: Optional[str] = None


class AssetModel(BaseModel):
    """Studio library asset"""
    name: str
    description: Optional[str] = None
    negatives: Optional[str] = None
    kind: Optional[str] = None
    ref_image_url: Optional[str] = None


class GenerateRequest(BaseModel):
    """
    Request type for dry-run prompt/payload construction

    Either pass a `library` to resolve assets and image pools by name, or
    pass pre-resolved assets and pools directly.
    """
    clip: ClipModel = Field(default_factory=ClipModel)
    model: Optional[str] = None
    aspect_ratio: Optional[str] = None
    seed: Optional[Union[int, str]] = None
    style_strength: Optional[float] = Field(default=None, ge=1, le=10)
    sound: bool = False

    # Studio item overrides
    subject_name: Optional[str] = None
    subject_description: Optional[str] = None
    subject_negatives: Optional[str] = None
    style_name: Optional[str] = None
    style_description: Optional[str] = None
    style_negatives: Optional[str] = None

    # Library resolution
    library: Optional[List[AssetModel]] = None

    # Pre-resolved assets and pools
    location_asset: Optional[AssetModel] = None
    character_assets: List[Optional[AssetModel]] = Field(default_factory=list)
    style_asset: Optional[AssetModel] = None
    camera_asset: Optional[AssetModel] = None
    location_images: List[str] = Field(default_factory=list)
    character_images: List[Optional[str]] = Field(default_factory=list)
    explicit_images: Optional[List[str]] = None
    style_image: Optional[str] = None

    def to_context(self) -> GenerationContext:
        """Convert the request into a pipeline GenerationContext"""
        clip = self.clip.model_dump(exclude_none=True)
        options = {
            "aspect_ratio": self.aspect_ratio,
            "seed": self.seed,
            "style_strength": self.style_strength,
            "sound": self.sound,
            "subject_name": self.subject_name,
            "subject_description": self.subject_description,
            "subject_negatives": self.subject_negatives,
            "style_name": self.style_name,
            "style_description": self.style_description,
            "style_negatives": self.style_negatives,
        }

        if self.library is not None:
            library = [asset.model_dump(exclude_none=True) for asset in self.library]
            return build_generation_context(
                clip, library, model=self.model, explicit_images=self.explicit_images, **options
            )

        def _asset(asset: Optional[AssetModel]) -> Optional[Dict[str, Any]]:
            return asset.model_dump(exclude_none=True) if asset else None

        context = {
            "clip": clip,
            "location_asset": _asset(self.location_asset),
            "character_assets": [_asset(a) for a in self.character_assets],
            "style_asset": _asset(self.style_asset),
            "camera_asset": _asset(self.camera_asset),
            "location_images": list(self.location_images),
            "character_images": list(self.character_images),
            "explicit_images": list(self.explicit_images or []),
            "style_image": self.style_image,
        }
        if self.model:
            context["model"] = self.model
        context.update({key: value for key, value in options.items() if value is not None})
        return context


class PromptResponse(BaseModel):
    """Response type for prompt construction"""
    prompt: str
    image_urls: List[str]
    warnings: List[str]
    schema_name: str
    fallback_used: bool


class PayloadResponse(BaseModel):
    """Response type for payload construction"""
    family: str
    builder: str
    payload: Dict[str, Any]
    dry_run: bool = True


class ModelInfoResponse(BaseModel):
    """Registry entry for a generation model"""
    id: str
    label: str
    family: str
    internal_id: str
    is_image: bool
    has_audio: bool
    description: Optional[str] = None


class ErrorResponse(BaseModel):
    """Type for error responses"""
    error: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)
