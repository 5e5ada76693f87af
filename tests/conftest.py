import pytest
from fastapi.testclient import TestClient

from clipstudio.api.main import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def desert_context():
    """Location plus two characters, each with a library image"""
    return {
        "clip": {"location": "Desert", "character": "CharA, CharB", "action": "Walking"},
        "model": "veo-fast",
        "location_asset": {"name": "Desert", "description": "Sandy dunes", "negatives": "rain"},
        "character_assets": [
            {"name": "CharA", "description": "A warrior", "negatives": "blurry"},
            {"name": "CharB", "description": "A mage", "negatives": "dark"},
        ],
        "location_images": ["http://loc.png"],
        "character_images": ["http://c1.png", "http://c2.png"],
        "explicit_images": [],
        "style_image": None,
    }


@pytest.fixture
def qiren_context():
    """Character whose only image is an explicit upload"""
    return {
        "clip": {"character": "Qiren", "action": "Qiren opens the lamp"},
        "model": "veo-fast",
        "character_assets": [
            {"name": "Qiren", "description": "Jinn", "ref_image_url": "http://qiren_master.png"}
        ],
        "location_images": [],
        "character_images": [],
        "explicit_images": ["http://misc.png", "http://qiren_master.png"],
        "style_image": None,
    }


@pytest.fixture
def style_asset():
    return {"name": "Ghibli", "description": "Soft watercolor", "negatives": "photoreal"}


@pytest.fixture
def library():
    return [
        {"name": "Desert", "kind": "location", "description": "Sandy dunes",
         "negatives": "rain", "ref_image_url": "http://loc.png"},
        {"name": "CharA", "kind": "character", "description": "A warrior",
         "negatives": "blurry", "ref_image_url": "http://c1.png"},
        {"name": "CharB", "kind": "character", "description": "A mage",
         "ref_image_url": "http://c2.png"},
        {"name": "Ghibli", "kind": "style", "description": "Soft watercolor",
         "ref_image_url": "http://style.png"},
        {"name": "Dolly In", "kind": "camera", "description": "Slow dolly in"},
    ]
