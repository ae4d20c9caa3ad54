"""Photo Email Template — HTML body sent to a guest who asked for their photo by email."""

from html import escape

_TEMPLATE = """<html>
  <head>
    <style>
      body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
      .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
      .header {{ text-align: center; margin-bottom: 20px; }}
      .photo-container {{ text-align: center; margin: 30px 0; }}
      .photo {{ max-width: 100%; height: auto; border-radius: 8px; }}
      .button {{ display: inline-block; padding: 10px 20px; background-color: {accent};
                color: white; text-decoration: none; border-radius: 4px; font-weight: bold; }}
      .footer {{ margin-top: 30px; font-size: 0.9em; color: #666; }}
    </style>
  </head>
  <body>
    <div class="container">
      <div class="header"><h2>Bonjour {name},</h2></div>
      <p>{body}</p>
      <div class="photo-container">
        <a href="{image_url}" class="button">Voir votre photo</a>
        <div style="margin-top: 20px;">
          <img src="{image_url}" alt="Votre photo" class="photo" />
        </div>
      </div>
      <div class="footer"><p>-- {project_name}</p></div>
    </div>
  </body>
</html>
"""

DEFAULT_BODY = "Merci d'avoir participé ! Voici votre photo."
DEFAULT_SUBJECT = "Votre photo"
DEFAULT_ACCENT = "#4F46E5"


def render_photo_email(
    name: str,
    image_url: str,
    project_name: str,
    body: str | None = None,
    accent_color: str | None = None,
) -> str:
    """Render the HTML body. Every interpolated value is escaped; newlines become <br>."""
    paragraph = "<br>".join(escape(line) for line in (body or DEFAULT_BODY).splitlines())
    return _TEMPLATE.format(
        name=escape(name),
        body=paragraph,
        image_url=escape(image_url, quote=True),
        project_name=escape(project_name),
        accent=escape(accent_color or DEFAULT_ACCENT, quote=True),
    )
