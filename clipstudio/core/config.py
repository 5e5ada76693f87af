"""Configuration for the prompt / payload construction pipeline"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Model Configuration
DEFAULT_MODEL = os.getenv('CLIPSTUDIO_DEFAULT_MODEL', 'veo-fast')

# Logging Configuration
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

# API Configuration
CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()]

# Image Selection Configuration
MAX_REFERENCE_IMAGES = 3  # Hard cap of images sent to any model
TRANSITION_FRAME_COUNT = 2  # Start frame + end frame
MIN_IMAGE_URL_LENGTH = 5  # URLs must be strictly longer than this
INVALID_URL_LITERALS = ("undefined", "null")

# Style Configuration
DEFAULT_STYLE_STRENGTH = 5  # UI range 1-10
MIN_STYLE_STRENGTH = 1
MAX_STYLE_STRENGTH = 10
DEFAULT_STYLE_NAME = "Cinematic"

# Aspect Ratio Mapping
# Maps UI preset names to W:H strings; W:H strings map to themselves
DEFAULT_ASPECT_RATIO = "16:9"
ASPECT_RATIOS = {
    # Preset names
    "vertical": "9:16",
    "horizontal": "16:9",
    "square": "1:1",
    "cinematic": "21:9",
    "portrait": "3:4",
    "landscape": "4:3",
    # Direct formats
    "9:16": "9:16",
    "16:9": "16:9",
    "1:1": "1:1",
    "21:9": "21:9",
    "3:4": "3:4",
    "4:3": "4:3"
}

# Veo Configuration (standard + start-to-end video)
VEO_CONFIG = {
    "fast_model": "veo3_fast",
    "quality_model": "veo3",  # Text-to-video only, no image references
    "quality_ids": ["veo-quality"],
    "transition_ids": ["veo-s2e"],
    "durations": ["5", "10"],
    "default_duration": "5",
    "enable_translation": True,
    "enable_fallback": True
}

# Veo generation type flags
TEXT_2_VIDEO = "TEXT_2_VIDEO"
REFERENCE_2_VIDEO = "REFERENCE_2_VIDEO"
FIRST_AND_LAST_FRAMES_2_VIDEO = "FIRST_AND_LAST_FRAMES_2_VIDEO"

# Flux Configuration (flat image)
FLUX_CONFIG = {
    "default_model": "flux-2/flex-image-to-image",
    "legacy_aliases": ["flux", "flux-pro", "flux-flex"],
    "resolution": "1K",
    "safety_tolerance": 5,  # 5 = most permissive
    "num_inference_steps": 50,
    "guidance_min": 1.5,
    "guidance_max": 10.0
}

# Nano Banana Configuration (dense image)
NANO_CONFIG = {
    "default_model": "nano-banana-pro",
    "resolution": "1K",
    "output_format": "png",
    "max_prompt_chars": 20000
}

# Kling Configuration (single-image video with audio)
KLING_CONFIG = {
    "default_model": "kling-2.6/image-to-video",
    "durations": ["5", "10"],
    "default_duration": "5",
    "max_images": 1,
    "max_prompt_chars": 2000
}


def setup_logging(level: str = None):
    """Configure root logging for the service"""
    logging.basicConfig(
        level=getattr(logging, level or LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
