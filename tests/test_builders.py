import pytest

from clipstudio.builders import build_payload, get_builder
from clipstudio.builders import payload_veo
from clipstudio.builders.payload_flux import FluxPayloadBuilder, compute_guidance, resolve_flux_model
from clipstudio.builders.payload_kling import KlingPayloadBuilder
from clipstudio.builders.base import truncate_prompt
from clipstudio.builders.payload_nano import NanoPayloadBuilder
from clipstudio.builders.payload_veo import VeoPayloadBuilder, TransitionPayloadBuilder
from clipstudio.core.config import TEXT_2_VIDEO, REFERENCE_2_VIDEO, FIRST_AND_LAST_FRAMES_2_VIDEO
from clipstudio.core.errors import ContractViolationError


def _transition(explicit_images):
    return {"clip": {"action": "Day turns to night"}, "model": "veo-s2e",
            "explicit_images": explicit_images}


class TestFactory:

    @pytest.mark.parametrize("model,builder_type", [
        ("veo-fast", VeoPayloadBuilder),
        ("veo-quality", VeoPayloadBuilder),
        ("veo-s2e", TransitionPayloadBuilder),
        ("flux-pro", FluxPayloadBuilder),
        ("nano-banana-pro", NanoPayloadBuilder),
        ("kling-2.6", KlingPayloadBuilder),
        ("unknown-model", VeoPayloadBuilder),
    ])
    def test_get_builder(self, model, builder_type):
        assert type(get_builder(model)) is builder_type

    def test_supports(self):
        assert get_builder("flux-pro").supports("flux-flex")
        assert not get_builder("flux-pro").supports("veo-fast")


class TestVeoPayloadBuilder:

    def test_reference_video(self, desert_context):
        payload = build_payload(desert_context)

        assert payload["model"] == "veo3_fast"
        assert payload["taskType"] == REFERENCE_2_VIDEO
        assert payload["generationType"] == REFERENCE_2_VIDEO
        assert payload["imageUrls"] == ["http://loc.png", "http://c1.png", "http://c2.png"]
        assert payload["aspectRatio"] == "16:9"
        assert payload["durationType"] == "5"
        assert payload["enableTranslation"] is True
        assert payload["enableFallback"] is True
        assert "LOCATION: Desert: IMAGE 1" in payload["prompt"]

    def test_quality_downgraded_when_images_attached(self, desert_context):
        payload = build_payload({**desert_context, "model": "veo-quality"})
        assert payload["model"] == "veo3_fast"

    def test_quality_kept_for_text_only(self):
        payload = build_payload({"clip": {"action": "Sunrise"}, "model": "veo-quality"})

        assert payload["model"] == "veo3"
        assert payload["generationType"] == TEXT_2_VIDEO
        assert payload["imageUrls"] == []

    @pytest.mark.parametrize("duration,expected", [("10s", "10"), ("10", "10"), ("7s", "5"), (None, "5")])
    def test_duration(self, desert_context, duration, expected):
        context = {**desert_context, "clip": {**desert_context["clip"], "duration": duration}}
        assert build_payload(context)["durationType"] == expected

    @pytest.mark.parametrize("aspect_ratio,expected", [
        ("vertical", "9:16"), ("Square", "1:1"), ("4:5", "4:5"), ("bogus", "16:9")
    ])
    def test_aspect_ratio(self, desert_context, aspect_ratio, expected):
        assert build_payload({**desert_context, "aspect_ratio": aspect_ratio})["aspectRatio"] == expected

    def test_unexpected_failure_degrades_to_text_only(self, monkeypatch, desert_context):
        def _explode(context, family=None):
            raise RuntimeError("selector exploded")

        monkeypatch.setattr(payload_veo, "construct_prompt", _explode)
        payload = VeoPayloadBuilder().build(desert_context)

        assert payload["generationType"] == TEXT_2_VIDEO
        assert payload["imageUrls"] == []
        assert payload["prompt"] == "CharA, CharB Walking at Desert"

    def test_contract_violation_is_not_swallowed(self, desert_context):
        with pytest.raises(ContractViolationError):
            build_payload({**desert_context, "explicit_images": "http://x.png"})


class TestTransitionPayloadBuilder:

    def test_two_frames(self):
        payload = build_payload(_transition(["http://start.png", "http://end.png"]))

        assert payload["model"] == "veo3_fast"
        assert payload["generationType"] == FIRST_AND_LAST_FRAMES_2_VIDEO
        assert payload["taskType"] == FIRST_AND_LAST_FRAMES_2_VIDEO
        assert payload["imageUrls"] == ["http://start.png", "http://end.png"]
        assert "Transitions from Start Frame (Image 1) to End Frame (Image 2)" in payload["prompt"]

    def test_one_frame_degrades_to_reference(self):
        payload = build_payload(_transition(["http://start.png"]))

        assert payload["generationType"] == REFERENCE_2_VIDEO
        assert payload["imageUrls"] == ["http://start.png"]
        assert "Image 2" not in payload["prompt"]

    def test_no_frames_degrades_to_text(self):
        payload = build_payload(_transition([]))

        assert payload["generationType"] == TEXT_2_VIDEO
        assert payload["imageUrls"] == []


class TestFluxPayloadBuilder:

    @pytest.mark.parametrize("strength,guidance", [(1, 1.5), (5, 5.3), (10, 10.0), (0, 1.5), ("junk", 5.3)])
    def test_compute_guidance(self, strength, guidance):
        assert compute_guidance(strength) == guidance

    def test_image_to_image(self, desert_context):
        payload = build_payload({**desert_context, "model": "flux-pro", "seed": "42"})

        assert payload["model"] == "flux-2/flex-image-to-image"
        assert payload["seed"] == 42
        assert payload["input"]["seed"] == 42
        assert payload["input"]["random_seed"] == 42
        assert payload["input"]["input_urls"] == ["http://loc.png", "http://c1.png", "http://c2.png"]
        assert payload["input"]["prompt"] == "Cinematic. CharA, CharB Walking at Desert."
        assert payload["input"]["guidance"] == 5.3
        assert payload["input"]["resolution"] == "1K"
        assert payload["input"]["num_inference_steps"] == 50

    def test_text_to_image_omits_optional_fields(self):
        payload = build_payload({"clip": {"action": "A lighthouse"}, "model": "flux-flex"})

        assert "input_urls" not in payload["input"]
        assert "seed" not in payload["input"]
        assert "seed" not in payload

    def test_resolve_flux_model(self):
        assert resolve_flux_model("flux-pro") == "flux-2/flex-image-to-image"
        assert resolve_flux_model("flux-2/pro-image-to-image") == "flux-2/pro-image-to-image"
        assert resolve_flux_model("flux") == "flux-2/flex-image-to-image"


class TestNanoPayloadBuilder:

    def test_payload(self, desert_context):
        payload = build_payload({**desert_context, "model": "nano-banana-pro", "aspect_ratio": "vertical"})

        assert payload["model"] == "nano-banana-pro"
        assert payload["input"]["image_input"] == ["http://loc.png", "http://c1.png", "http://c2.png"]
        assert payload["input"]["aspect_ratio"] == "9:16"
        assert payload["input"]["resolution"] == "1K"
        assert payload["input"]["output_format"] == "png"
        assert "ESSENTIAL: IMAGE 2" in payload["input"]["prompt"]

    def test_image_input_always_a_list(self):
        payload = build_payload({"clip": {"action": "A lamp"}, "model": "nano-banana-pro"})
        assert payload["input"]["image_input"] == []

    def test_long_prompt_truncated_with_ellipsis(self):
        payload = build_payload({"clip": {"action": "x" * 25000}, "model": "nano-banana-pro"})

        assert len(payload["input"]["prompt"]) == 20000
        assert payload["input"]["prompt"].endswith("...")


class TestKlingPayloadBuilder:

    def test_first_selected_image_only(self, desert_context):
        context = {**desert_context, "model": "kling-2.6"}
        payload = build_payload(context)

        assert payload["model"] == "kling-2.6/image-to-video"
        assert payload["input"]["image_urls"] == ["http://loc.png"]
        assert "LOCATION: Desert: IMAGE 1: [Sandy dunes]." in payload["input"]["prompt"]
        assert "CHARACTER: CharA: [A warrior]." in payload["input"]["prompt"]
        assert "IMAGE 2" not in payload["input"]["prompt"]

    def test_explicit_upload_takes_priority(self, desert_context):
        context = {**desert_context, "model": "kling-2.6", "explicit_images": ["http://ref_upload.png"]}
        payload = build_payload(context)

        assert payload["input"]["image_urls"] == ["http://ref_upload.png"]
        assert "REF IMAGE 1: IMAGE 1: [Additional Reference]." in payload["input"]["prompt"]
        assert "LOCATION: Desert: [Sandy dunes]." in payload["input"]["prompt"]

    def test_sound_and_duration(self, desert_context):
        context = {**desert_context, "model": "kling-2.6", "sound": True,
                   "clip": {**desert_context["clip"], "duration": "10s"}}
        payload = build_payload(context)

        assert payload["input"]["sound"] is True
        assert payload["input"]["duration"] == "10"

    def test_prompt_truncated(self):
        payload = build_payload({"clip": {"action": "x" * 3000}, "model": "kling-2.6"})
        assert len(payload["input"]["prompt"]) == 2000


class TestTruncatePrompt:

    def test_fits(self):
        assert truncate_prompt("short", 8, "NanoPayloadBuilder", suffix="...") == "short"

    def test_suffix_counts_toward_limit(self):
        assert truncate_prompt("a" * 10, 8, "NanoPayloadBuilder", suffix="...") == "aaaaa..."

    def test_hard_cut_without_suffix(self):
        assert truncate_prompt("a" * 10, 8, "KlingPayloadBuilder") == "a" * 8


def test_task_type_mirrors_generation_type():
    payload = build_payload({"clip": {"action": "Sunrise"}, "model": "veo-fast",
                             "explicit_images": ["http://e1.png"]})

    assert payload["generationType"] == REFERENCE_2_VIDEO
    assert payload["taskType"] == REFERENCE_2_VIDEO
