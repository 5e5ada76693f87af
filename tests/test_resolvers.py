from clipstudio.builders import build_generation_context, build_payload, find_asset
from clipstudio.builders.resolvers import split_urls


def test_find_asset_is_case_insensitive_and_kind_scoped(library):
    assert find_asset(library, "desert", "location")["name"] == "Desert"
    assert find_asset(library, " chara ")["name"] == "CharA"
    assert find_asset(library, "Desert", "character") is None
    assert find_asset(library, "") is None
    assert find_asset(library, None) is None


def test_split_urls():
    assert split_urls("http://a.png, ,http://b.png ") == ["http://a.png", "http://b.png"]
    assert split_urls(None) == []


def test_build_generation_context(library):
    clip = {
        "location": "Desert",
        "character": "CharA, Nobody",
        "style": "Ghibli",
        "camera": "dolly in",
        "action": "Walking",
        "explicit_ref_urls": "http://x1.png, http://x2.png",
    }
    context = build_generation_context(clip, library, model="veo-fast", style_strength=7, seed=None)

    assert context["model"] == "veo-fast"
    assert context["location_images"] == ["http://loc.png"]
    assert [asset and asset["name"] for asset in context["character_assets"]] == ["CharA", None]
    assert context["character_images"] == ["http://c1.png", None]
    assert context["style_image"] == "http://style.png"
    assert context["camera_asset"]["name"] == "Dolly In"
    assert context["explicit_images"] == ["http://x1.png", "http://x2.png"]
    assert context["style_strength"] == 7
    assert "seed" not in context


def test_explicit_images_argument_overrides_clip(library):
    clip = {"explicit_ref_urls": "http://x1.png"}
    context = build_generation_context(clip, library, explicit_images=["http://other.png"])
    assert context["explicit_images"] == ["http://other.png"]


def test_resolved_context_builds_payload(library):
    clip = {"location": "Desert", "character": "CharA, Nobody", "style": "Ghibli", "action": "Walking"}
    payload = build_payload(build_generation_context(clip, library, model="veo-fast"))

    assert payload["imageUrls"] == ["http://loc.png", "http://c1.png", "http://style.png"]
    assert "Image 3 defines the STYLE" in payload["prompt"]
    assert "CHARACTER: Nobody: [Nobody]." in payload["prompt"]
