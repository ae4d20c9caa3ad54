"""Asset Naming — storage keys, safe file names, slugs and catalog labels."""

from uuid import UUID

from photobooth.core.asset_naming import (
    background_label, extension_for, is_fresque_theme, is_safe_key,
    project_key, project_prefix, safe_filename, slugify, watermarked_key,
)

PID = UUID("12345678-1234-5678-1234-567812345678")


def test_safe_filename_sanitises_stem_and_lowercases_extension():
    assert safe_filename("Mon Selfie!.PNG", "abc") == "Mon_Selfie-abc.png"


def test_safe_filename_strips_directories():
    assert safe_filename("../../etc/passwd.jpg", "t") == "passwd-t.jpg"


def test_safe_filename_without_name_uses_content_type():
    assert safe_filename(None, "t", "image/png") == "file-t.png"


def test_extension_for_unknown_type_uses_default():
    assert extension_for("application/pdf") == "jpg"
    assert extension_for("video/webm") == "webm"
    assert extension_for(None, "mp4") == "mp4"


def test_project_keys_are_scoped_by_project():
    assert project_key(PID, "styles", "a.png") == f"projects/{PID}/styles/a.png"
    assert project_prefix(PID) == f"projects/{PID}/"
    assert watermarked_key(PID, 1700000000000) == f"watermarked/{PID}/1700000000000.jpg"


def test_is_safe_key_rejects_traversal_and_absolute_keys():
    assert is_safe_key("projects/x/a.png")
    assert not is_safe_key("/etc/passwd")
    assert not is_safe_key("uploads/../secret")
    assert not is_safe_key("uploads//a")
    assert not is_safe_key("")
    assert not is_safe_key("uploads\\a")


def test_slugify_strips_accents():
    assert slugify("Soirée Été 2025") == "soiree-ete-2025"
    assert slugify("  --Gala!!  ") == "gala"


def test_background_label():
    assert background_label("background-3.png") == "Fond 3"
    assert background_label("background_garden.jpg") == "Fond Garden"
    assert background_label("logo.png") is None


def test_is_fresque_theme():
    assert is_fresque_theme("bg-forest.jpg")
    assert is_fresque_theme("BG-sea.PNG")
    assert not is_fresque_theme("forest.jpg")
    assert not is_fresque_theme("bg-forest.webp")
