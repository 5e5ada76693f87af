import pytest

from clipstudio.builders import ModelFamily, construct_prompt, resolve_model_family, get_available_models
from clipstudio.builders import constructor
from clipstudio.builders.constructor import FALLBACK_PROMPT, target_model
from clipstudio.core.errors import ContractViolationError
from clipstudio.prompts import PromptSchema


class BrokenSchema(PromptSchema):
    name = "broken"

    def format(self, context, manifest):
        raise ValueError("boom")


@pytest.mark.parametrize("model,family", [
    ("veo-fast", ModelFamily.STANDARD_VIDEO),
    ("veo-quality", ModelFamily.STANDARD_VIDEO),
    ("VEO-S2E", ModelFamily.TRANSITION_VIDEO),
    ("veo3_fast", ModelFamily.STANDARD_VIDEO),
    ("flux-pro", ModelFamily.FLAT_IMAGE),
    ("flux-2/flex-image-to-image", ModelFamily.FLAT_IMAGE),
    ("google/nano-banana", ModelFamily.DENSE_IMAGE),
    ("kling-2.6/image-to-video", ModelFamily.SINGLE_IMAGE_VIDEO),
    ("mystery-model", ModelFamily.STANDARD_VIDEO),
])
def test_resolve_model_family(model, family):
    assert resolve_model_family(model) is family


def test_registry_lists_ui_models():
    assert {"veo-fast", "veo-s2e", "flux-pro", "nano-banana-pro", "kling-2.6"} <= set(get_available_models())


@pytest.mark.parametrize("model,schema", [
    ("veo-fast", "standard"),
    ("veo-s2e", "transition"),
    ("flux-flex", "legacy"),
    ("nano-banana-pro", "nano"),
    ("kling-2.6", "standard"),
])
def test_schema_follows_model(desert_context, model, schema):
    constructed = construct_prompt({**desert_context, "model": model})
    assert constructed["schema"] == schema


def test_constructed_prompt_shape(desert_context):
    constructed = construct_prompt(desert_context)

    assert constructed["image_urls"] == ["http://loc.png", "http://c1.png", "http://c2.png"]
    assert constructed["warnings"] == []
    assert constructed["fallback_used"] is False
    assert "ACTION: [Walking]." in constructed["prompt"]


def test_request_model_beats_clip_model(desert_context):
    context = {**desert_context, "clip": {**desert_context["clip"], "model": "flux-pro"}}
    assert target_model(context) == "veo-fast"

    del context["model"]
    assert target_model(context) == "flux-pro"
    assert construct_prompt(context)["schema"] == "legacy"


def test_schema_failure_uses_subject_fallback(monkeypatch, desert_context):
    monkeypatch.setitem(constructor.SCHEMA_REGISTRY, ModelFamily.STANDARD_VIDEO, BrokenSchema())
    constructed = construct_prompt(desert_context)

    assert constructed["prompt"] == "CharA, CharB Walking at Desert"
    assert constructed["warnings"] == ["Schema Error: boom"]
    assert constructed["fallback_used"] is True
    assert constructed["image_urls"] == ["http://loc.png", "http://c1.png", "http://c2.png"]


def test_schema_failure_without_subject(monkeypatch):
    monkeypatch.setitem(constructor.SCHEMA_REGISTRY, ModelFamily.STANDARD_VIDEO, BrokenSchema())
    constructed = construct_prompt({"clip": {}, "model": "veo-fast"})

    assert constructed["prompt"] == FALLBACK_PROMPT
    assert constructed["fallback_used"] is True


def test_contract_violation_propagates(desert_context):
    with pytest.raises(ContractViolationError):
        construct_prompt({**desert_context, "character_images": "http://c1.png"})
