"""Generation Rules — Replicate request checks and vendor result extraction."""

from types import SimpleNamespace

import pytest

from photobooth.core.errors import ValidationFailedError
from photobooth.core.generation_rules import (
    extract_image_url, face_swap_arguments, fal_gender, normalize_output,
    validate_replicate_request,
)


def test_model_is_required():
    with pytest.raises(ValidationFailedError) as exc:
        validate_replicate_request(None, {})
    assert exc.value.field == "model"


def test_input_must_be_a_dict():
    with pytest.raises(ValidationFailedError) as exc:
        validate_replicate_request("owner/model", "prompt")
    assert exc.value.field == "input"


def test_input_image_must_be_data_uri():
    with pytest.raises(ValidationFailedError) as exc:
        validate_replicate_request("owner/model", {"input_image": "https://x/a.jpg"})
    assert exc.value.field == "input.input_image"


def test_kontext_requires_prompt():
    with pytest.raises(ValidationFailedError) as exc:
        validate_replicate_request(
            "black-forest-labs/flux-kontext-pro",
            {"prompt": "  ", "input_image": "data:image/png;base64,AA=="},
        )
    assert exc.value.field == "input.prompt"


def test_valid_request_passes():
    validate_replicate_request(
        "black-forest-labs/flux-kontext-pro",
        {"prompt": "oil painting", "input_image": "data:image/png;base64,AA=="},
    )


def test_fal_gender():
    assert fal_gender("f") == "female"
    assert fal_gender("af") == "female"
    assert fal_gender("m") == "male"
    assert fal_gender("g") == "male"
    assert fal_gender(None) == "male"
    assert fal_gender("unknown") == "male"


def test_face_swap_arguments():
    args = face_swap_arguments("data:image/png;base64,AA==", "https://x/style.jpg", "f")
    assert args == {
        "face_image_0": "data:image/png;base64,AA==",
        "gender_0": "female",
        "target_image": "https://x/style.jpg",
        "workflow_type": "target_hair",
    }


def test_normalize_output_flattens_file_outputs():
    output = ["https://a", SimpleNamespace(url="https://b")]
    assert normalize_output(output) == ["https://a", "https://b"]
    assert normalize_output(None) == []
    assert normalize_output("https://c") == ["https://c"]


def test_extract_image_url_shapes():
    assert extract_image_url({"image": {"url": "https://i"}}) == "https://i"
    assert extract_image_url({"video": {"url": "https://v"}}) == "https://v"
    assert extract_image_url({"images": [{"url": "https://first"}]}) == "https://first"
    assert extract_image_url({"output": "https://o"}) == "https://o"
    assert extract_image_url({"url": "https://u"}) == "https://u"


def test_extract_image_url_unknown_shape_is_none():
    assert extract_image_url("https://x") is None
    assert extract_image_url({"images": []}) is None
    assert extract_image_url({}) is None
