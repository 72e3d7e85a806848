"""Outbound email (Mailgun preferred, SendGrid fallback).

Sending never raises: every method returns True when the provider accepted the
message and False otherwise, logging the reason. Callers decide whether a failed
send matters.
"""
import logging

import httpx

from app.config import Settings

logger = logging.getLogger(__name__)

MAILGUN_US_BASE = "https://api.mailgun.net"
MAILGUN_EU_BASE = "https://api.eu.mailgun.net"

PURPOSE_VERIFY_EMAIL = "verify_email"
PURPOSE_RESET_PASSWORD = "reset_password"


class Mailer:
    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def mailgun_configured(self) -> bool:
        return bool(self.settings.mailgun_api_key and self.settings.mailgun_domain)

    def send_email(self, to_email: str, subject: str, html_content: str, text_content: str | None = None) -> bool:
        if self.mailgun_configured:
            return self._send_email_mailgun(to_email, subject, html_content, text_content=text_content)
        if self.settings.sendgrid_api_key:
            return self._send_email_sendgrid(to_email, subject, html_content, text_content=text_content)
        logger.warning(
            "Email NOT sent to %s (%s): neither MAILGUN_API_KEY/MAILGUN_DOMAIN nor SENDGRID_API_KEY is set.",
            to_email,
            subject,
        )
        return False

    def _send_email_mailgun(self, to_email: str, subject: str, html_content: str, text_content: str | None = None) -> bool:
        s = self.settings
        base = (s.mailgun_base_url or MAILGUN_US_BASE).strip().rstrip("/")
        domain = s.mailgun_domain.lower()
        from_addr = s.mailgun_from_email
        from_domain = from_addr.split("@")[-1].lower() if "@" in from_addr else ""
        if domain and from_domain != domain:
            # Mailgun rejects a sender outside the sending domain
            from_addr = f"noreply@{domain}"
        data = {
            "from": f"{s.mailgun_from_name} <{from_addr}>",
            "to": to_email,
            "subject": subject,
            "text": text_content or "",
            "html": html_content or "",
        }
        try:
            with httpx.Client(timeout=10.0) as client:
                r = client.post(f"{base}/v3/{domain}/messages", auth=("api", s.mailgun_api_key), data=data)
                if 200 <= r.status_code < 300:
                    logger.info("Mailgun accepted message to %s", to_email)
                    return True
                if r.status_code == 401 and base == MAILGUN_US_BASE:
                    logger.info("Mailgun returned 401 on the US endpoint, trying EU")
                    r = client.post(f"{MAILGUN_EU_BASE}/v3/{domain}/messages", auth=("api", s.mailgun_api_key), data=data)
                    if 200 <= r.status_code < 300:
                        logger.info("Mailgun (EU) accepted message to %s", to_email)
                        return True
                logger.error("Mailgun failed: status=%s to=%s body=%s", r.status_code, to_email, r.text[:500])
                return False
        except httpx.HTTPError as e:
            logger.error("Mailgun request error: to=%s error=%s: %s", to_email, type(e).__name__, e)
            return False

    def _send_email_sendgrid(self, to_email: str, subject: str, html_content: str, text_content: str | None = None) -> bool:
        from sendgrid import SendGridAPIClient
        from sendgrid.helpers.mail import Mail

        s = self.settings
        message = Mail(
            from_email=(s.sendgrid_from_email, s.sendgrid_from_name),
            to_emails=to_email,
            subject=subject,
            html_content=html_content,
            plain_text_content=text_content or "",
        )
        try:
            SendGridAPIClient(s.sendgrid_api_key).send(message)
        except Exception as e:
            logger.error("SendGrid failed: to=%s error=%s: %s", to_email, type(e).__name__, e)
            return False
        return True

    def send_otp(self, to_email: str, code: str, purpose: str = PURPOSE_VERIFY_EMAIL) -> bool:
        """Send a one-time code for email verification or password reset."""
        minutes = self.settings.otp_expire_minutes
        name = self.settings.app_name
        if purpose == PURPOSE_RESET_PASSWORD:
            subject = f"[{name}] Your password reset code"
            lead = "Use this code to reset your password:"
        else:
            subject = f"[{name}] Your verification code"
            lead = "Your verification code is:"
        text_content = f"{lead} {code}. This code will expire in {minutes} minutes."
        html_content = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
      <h2>Verification Code</h2>
      <p>{lead}</p>
      <p style="font-size: 24px; letter-spacing: 5px; font-weight: bold;">{code}</p>
      <p>This code will expire in {minutes} minutes.</p>
      <p>If you didn't request this code, please ignore this email.</p>
    </div>
    """
        return self.send_email(to_email, subject, html_content, text_content=text_content)
