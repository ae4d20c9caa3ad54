"""Request schema validation — normalisation and rejection rules applied before services.

Invariants:
    - Emails are stripped and lowercased; malformed ones rejected
    - Slugs are lowercase words joined by single dashes
    - PATCH payloads may omit anything but never null out required columns
    - Watermark elements need content matching their type; extra editor keys survive
"""

import pytest
from pydantic import ValidationError

from photobooth.schemas.auth import RegisterRequest
from photobooth.schemas.email import SubscriptionCreate
from photobooth.schemas.generation import BoothGenerationRequest
from photobooth.schemas.mosaic import MosaicSettingsPayload
from photobooth.schemas.photo_session import SessionRecord
from photobooth.schemas.project import ProjectCreate, ProjectUpdate
from photobooth.schemas.watermark import WatermarkElement, WatermarkElementsPayload


# --- Auth ---------------------------------------------------------------------

def test_register_normalises_email():
    req = RegisterRequest(email="  Owner@Studio.EXAMPLE.COM ", password="123456")
    assert req.email == "owner@studio.example.com"


@pytest.mark.parametrize("email", ["no-at-sign", "a@b", "a b@c.de"])
def test_register_rejects_malformed_email(email):
    with pytest.raises(ValidationError):
        RegisterRequest(email=email, password="123456")


def test_register_password_bounds():
    with pytest.raises(ValidationError):
        RegisterRequest(email="a@b.example.com", password="12345")
    with pytest.raises(ValidationError):
        RegisterRequest(email="a@b.example.com", password="x" * 73)


# --- Projects -----------------------------------------------------------------

def test_project_create_defaults():
    project = ProjectCreate(name="  Gala  ")
    assert project.name == "Gala"
    assert project.slug is None
    assert project.photobooth_type == "standard"


@pytest.mark.parametrize("slug", ["Gala", "gala--2025", "-gala", "gala_2025"])
def test_project_create_rejects_bad_slugs(slug):
    with pytest.raises(ValidationError):
        ProjectCreate(name="Gala", slug=slug)


def test_project_create_rejects_blank_name():
    with pytest.raises(ValidationError):
        ProjectCreate(name="   ")


def test_project_update_tracks_only_sent_fields():
    update = ProjectUpdate(home_message="Bienvenue")
    assert update.model_dump(exclude_unset=True) == {"home_message": "Bienvenue"}


def test_project_update_rejects_null_required_column():
    with pytest.raises(ValidationError):
        ProjectUpdate(slug=None)


def test_project_update_allows_null_optional_column():
    update = ProjectUpdate(watermark_text=None)
    assert update.model_dump(exclude_unset=True) == {"watermark_text": None}


def test_project_update_sender_address():
    assert ProjectUpdate(email_from="  ").email_from is None
    assert ProjectUpdate(email_from="Photos@Studio.EXAMPLE.COM").email_from == "photos@studio.example.com"
    with pytest.raises(ValidationError):
        ProjectUpdate(email_from="photos@studio")


def test_project_update_watermark_opacity_bounds():
    with pytest.raises(ValidationError):
        ProjectUpdate(watermark_opacity=1.5)


# --- Sessions & generation ----------------------------------------------------

def test_session_record_dumps_gender_code():
    record = SessionRecord(gender="af", user_email="Guest@Mail.EXAMPLE.COM")
    dumped = record.model_dump()
    assert dumped["gender"] == "af"
    assert dumped["user_email"] == "guest@mail.example.com"


def test_session_record_rejects_negative_duration():
    with pytest.raises(ValidationError):
        SessionRecord(processing_time_ms=-1)


@pytest.mark.parametrize("image", ["https://cdn.test/a.png", "data:image/jpeg;base64,AAAA"])
def test_booth_request_accepts_urls_and_data_uris(image):
    req = BoothGenerationRequest(
        project_slug="gala", style_id="6f1c2a3e-8b2d-4f7a-9c1e-0a2b3c4d5e6f", image=image,
    )
    assert req.image == image


def test_booth_request_rejects_other_schemes():
    with pytest.raises(ValidationError):
        BoothGenerationRequest(
            project_slug="gala", style_id="6f1c2a3e-8b2d-4f7a-9c1e-0a2b3c4d5e6f",
            image="file:///tmp/a.png",
        )


# --- Watermark & mosaic -------------------------------------------------------

def test_watermark_element_keeps_editor_extras():
    element = WatermarkElement(type="text", text="Hi", fontStyle="italic", draggable=True)
    dumped = element.model_dump(exclude_none=True)
    assert dumped["fontStyle"] == "italic"
    assert dumped["draggable"] is True


def test_watermark_image_element_requires_src():
    with pytest.raises(ValidationError):
        WatermarkElement(type="image")


def test_watermark_element_opacity_bounds():
    with pytest.raises(ValidationError):
        WatermarkElement(type="text", text="x", opacity=1.2)


def test_watermark_payload_caps_element_count():
    with pytest.raises(ValidationError):
        WatermarkElementsPayload(elements=[{"type": "text", "text": "x"}] * 51)


def test_mosaic_defaults():
    settings = MosaicSettingsPayload()
    assert settings.bg_color == "#000000"
    assert settings.qr_title == "Scannez-moi"
    assert settings.qr_position == "center"


# --- Email subscriptions --------------------------------------------------------

@pytest.mark.parametrize("email", ["", "   ", "guest@", "guest@@mail.example.com"])
def test_subscription_requires_a_valid_address(email):
    with pytest.raises(ValidationError):
        SubscriptionCreate(name="Guest", email=email, image_url="https://cdn.test/p.png")
