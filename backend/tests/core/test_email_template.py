"""Photo Email Template — escaping and defaults."""

from photobooth.core.email_template import DEFAULT_ACCENT, DEFAULT_BODY, render_photo_email


def test_values_are_escaped():
    html = render_photo_email("<b>Eve</b>", "https://x/a.jpg?a=1&b=2", "Gala & Co")
    assert "&lt;b&gt;Eve&lt;/b&gt;" in html
    assert "a=1&amp;b=2" in html
    assert "Gala &amp; Co" in html


def test_defaults_apply():
    html = render_photo_email("Eve", "https://x/a.jpg", "Gala")
    assert "Merci d&#x27;avoir participé" in html
    assert DEFAULT_ACCENT in html
    assert DEFAULT_BODY


def test_body_newlines_become_breaks():
    html = render_photo_email("Eve", "https://x", "Gala", body="Line 1\nLine 2", accent_color="#811A53")
    assert "Line 1<br>Line 2" in html
    assert "#811A53" in html
