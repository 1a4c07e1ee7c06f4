"""
Sign-in email renderings.

Both renderings carry the same content: the verification URL, verbatim,
and the 24-hour validity window. All HTML styles are inline for mail
client compatibility.
"""

from datetime import datetime, timezone
from typing import Optional

from .models import MailMessage

PRODUCT_NAME = "ResumeTailor"
SIGN_IN_SUBJECT = f"Your Sign-In Link for {PRODUCT_NAME}"
BRAND_COLOR = "#7e22ce"
LINK_VALIDITY = "24 hours"

_HTML_TEMPLATE = """
<body style="background-color: #f3f4f6; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif; padding: 20px;">
  <table width="100%" border="0" cellspacing="0" cellpadding="0" style="margin: 0 auto; max-width: 600px;">
    <tr>
      <td align="center">
        <table width="100%" border="0" cellspacing="0" cellpadding="0" style="background-color: #ffffff; border: 1px solid #e5e7eb; border-radius: 8px;">
          <tr>
            <td align="center" style="padding: 20px; border-bottom: 1px solid #e5e7eb;">
              <h1 style="font-size: 24px; font-weight: 600; color: #111827; margin: 0;">{product}</h1>
            </td>
          </tr>
          <tr>
            <td style="padding: 30px 40px;">
              <h2 style="font-size: 20px; font-weight: 600; color: #111827; margin-top: 0;">Your secure sign-in link</h2>
              <p style="font-size: 16px; line-height: 1.6; color: #374151;">
                Welcome! Please click the button below to sign in to your {product} dashboard.
              </p>
              <a href="{url}" target="_blank" style="display: inline-block; font-size: 16px; color: #ffffff; text-decoration: none; padding: 14px 28px; border-radius: 6px; font-weight: 500; background-color: {brand_color}; margin: 20px 0;">
                Sign In to Your Account
              </a>
              <p style="font-size: 16px; line-height: 1.6; color: #374151;">
                This link is valid for {validity}. If you did not request this, you can safely ignore this email.
              </p>
            </td>
          </tr>
          <tr>
            <td align="center" style="padding: 20px; border-top: 1px solid #e5e7eb; background-color: #f8fafc;">
              <p style="font-size: 14px; color: #6b7280; margin: 0;">
                &copy; {year} {product}
              </p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>"""

_TEXT_TEMPLATE = """
Sign in to {product}
-----------------------
Click this link to sign in: {url}
(This link is valid for {validity})
"""


def render_html(url: str, year: Optional[int] = None) -> str:
    """Render the styled notification."""
    if year is None:
        year = datetime.now(timezone.utc).year
    # str.replace keeps braces inside the URL from being read as fields
    return (
        _HTML_TEMPLATE.replace("{product}", PRODUCT_NAME)
        .replace("{brand_color}", BRAND_COLOR)
        .replace("{validity}", LINK_VALIDITY)
        .replace("{year}", str(year))
        .replace("{url}", url)
    )


def render_text(url: str) -> str:
    """Render the plain-text fallback."""
    return (
        _TEXT_TEMPLATE.replace("{product}", PRODUCT_NAME)
        .replace("{validity}", LINK_VALIDITY)
        .replace("{url}", url)
    )


def compose_sign_in_message(recipient: str, sender: str, url: str) -> MailMessage:
    """Build the sign-in email for a verification URL."""
    return MailMessage(
        to=recipient,
        sender=sender,
        subject=SIGN_IN_SUBJECT,
        text=render_text(url),
        html=render_html(url),
    )
