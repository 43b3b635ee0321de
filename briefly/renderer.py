"""
Template renderer for digest emails.

Produces a self-contained HTML document with inline styles only, since the
output is displayed by mail clients we do not control.
"""

from html import escape
from typing import List

from briefly.models import CategoryStyle, Digest, DigestItem, DigestSection, EditorsNote

FONT = "'Helvetica Neue', Helvetica, Arial, sans-serif"


class TemplateRenderer:
    """Renders a Digest plus the editor's note into an HTML email."""

    _EMAIL_STYLES = {
        "body": f"margin: 0; padding: 0; background-color: #F3F4F6; font-family: {FONT};",
        "container": "max-width: 600px; margin: 0 auto; background-color: #ffffff; padding-bottom: 40px;",
        "header": "background-color: #000000; padding: 40px 30px; text-align: center;",
        "header_h1": "color: #ffffff; margin: 0; font-size: 40px; font-weight: 800; letter-spacing: -2px;",
        "header_p": "color: #9CA3AF; margin: 10px 0 0 0; font-size: 14px; text-transform: uppercase; letter-spacing: 1px;",
        "note": "margin: 24px 30px 0 30px; padding: 16px 20px; background-color: #FEF3C7; border-left: 4px solid #F59E0B; border-radius: 8px;",
        "note_label": "margin: 0 0 6px 0; font-size: 11px; font-weight: 700; color: #92400E; text-transform: uppercase; letter-spacing: 1px;",
        "note_text": "margin: 0; font-size: 15px; line-height: 1.5; color: #1F2937;",
        "content": "padding: 10px 30px;",
        "pill_wrap": "margin: 30px 0 15px 0;",
        "pill": "color: #fff; padding: 4px 12px; border-radius: 100px; font-size: 12px; font-weight: 700; text-transform: uppercase; font-family: Helvetica, Arial, sans-serif;",
        "card_link": "text-decoration: none; color: inherit; display: block; margin-bottom: 20px;",
        "card": "background: #ffffff; border: 1px solid #E5E7EB; border-radius: 12px; overflow: hidden;",
        "card_image": "height: 200px; width: 100%; background-size: cover; background-position: center;",
        "card_body": "padding: 20px;",
        "card_h3": f"margin: 0 0 8px 0; color: #111827; font-size: 18px; line-height: 1.4; font-weight: 700; font-family: {FONT};",
        "card_p": "margin: 0; color: #6B7280; font-size: 14px; line-height: 1.6;",
        "text_link": "text-decoration: none; color: inherit; display: block; margin-bottom: 15px;",
        "text_card": "background: #F9FAFB; border-radius: 8px; padding: 16px;",
        "text_h3": f"margin: 0; color: #1F2937; font-size: 16px; line-height: 1.4; font-weight: 600; font-family: {FONT};",
        "text_p": "margin: 6px 0 0 0; color: #6B7280; font-size: 12px;",
        "footer": "text-align: center; margin-top: 40px; padding-top: 20px; border-top: 1px solid #E5E7EB;",
        "footer_p": "color: #9CA3AF; font-size: 12px;",
    }

    def __init__(
        self,
        brand: str = "Briefly.",
        tagline: str = "The World's Best Daily Digest",
        footer: str = "© Briefly Inc.",
    ):
        self.brand = brand
        self.tagline = tagline
        self.footer = footer

    def _render_pill(self, style: CategoryStyle) -> str:
        return f"""
            <div style="{self._EMAIL_STYLES['pill_wrap']}">
              <span style="background-color: {escape(style.color)}; {self._EMAIL_STYLES['pill']}">
                {escape(style.emoji)} {escape(style.label)}
              </span>
            </div>
        """

    def _render_image_card(self, item: DigestItem) -> str:
        image = escape(item.image_url or "", quote=True)
        return f"""
            <a href="{escape(item.link, quote=True)}" style="{self._EMAIL_STYLES['card_link']}">
              <div style="{self._EMAIL_STYLES['card']}">
                <div style="background-image: url('{image}'); {self._EMAIL_STYLES['card_image']}"></div>
                <div style="{self._EMAIL_STYLES['card_body']}">
                  <h3 style="{self._EMAIL_STYLES['card_h3']}">{escape(item.title)}</h3>
                  <p style="{self._EMAIL_STYLES['card_p']}">Click to read full story &rarr;</p>
                </div>
              </div>
            </a>
        """

    def _render_text_card(self, item: DigestItem, style: CategoryStyle) -> str:
        return f"""
            <a href="{escape(item.link, quote=True)}" style="{self._EMAIL_STYLES['text_link']}">
              <div style="border-left: 4px solid {escape(style.color)}; {self._EMAIL_STYLES['text_card']}">
                <h3 style="{self._EMAIL_STYLES['text_h3']}">{escape(item.title)}</h3>
                <p style="{self._EMAIL_STYLES['text_p']}">Read more &rarr;</p>
              </div>
            </a>
        """

    def _render_section(self, section: DigestSection) -> str:
        parts: List[str] = [self._render_pill(section.style)]
        for item in section.items:
            if item.image_url:
                parts.append(self._render_image_card(item))
            else:
                parts.append(self._render_text_card(item, section.style))
        return "".join(parts)

    def _render_note(self, note: str) -> str:
        return f"""
          <div style="{self._EMAIL_STYLES['note']}">
            <p style="{self._EMAIL_STYLES['note_label']}">Editor's Note</p>
            <p style="{self._EMAIL_STYLES['note_text']}">{escape(note)}</p>
          </div>
        """

    def render(self, digest: Digest, note: EditorsNote) -> str:
        """Generates the HTML document for one subscriber."""
        sections = "".join(self._render_section(s) for s in digest.sections)
        return f"""<!DOCTYPE html>
<html>
<body style="{self._EMAIL_STYLES['body']}">
  <div style="{self._EMAIL_STYLES['container']}">
    <div style="{self._EMAIL_STYLES['header']}">
      <h1 style="{self._EMAIL_STYLES['header_h1']}">{escape(self.brand)}</h1>
      <p style="{self._EMAIL_STYLES['header_p']}">{escape(self.tagline)}</p>
    </div>
    {self._render_note(note.content)}
    <div style="{self._EMAIL_STYLES['content']}">{sections}</div>
    <div style="{self._EMAIL_STYLES['footer']}">
      <p style="{self._EMAIL_STYLES['footer_p']}">{escape(self.footer)}</p>
    </div>
  </div>
</body>
</html>
"""
