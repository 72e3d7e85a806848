"""
Send a test verification-code email to check the mail provider settings.
Usage: python scripts/send_test_email.py <to_email>
"""
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.config import get_settings
from app.services.notifications import Mailer
from app.services.otp import generate_code


def main():
    to_email = (sys.argv[1] if len(sys.argv) > 1 else "").strip()
    if not to_email:
        print("Usage: python scripts/send_test_email.py <to_email>")
        sys.exit(1)

    settings = get_settings()
    mailer = Mailer(settings)
    if mailer.mailgun_configured:
        print(f"Provider: Mailgun domain={settings.mailgun_domain} from={settings.mailgun_from_email}")
    elif settings.sendgrid_api_key:
        print(f"Provider: SendGrid from={settings.sendgrid_from_email}")
    else:
        print("No mail provider configured. Set MAILGUN_API_KEY and MAILGUN_DOMAIN (or SENDGRID_API_KEY) in .env")
        sys.exit(1)

    if mailer.send_otp(to_email, generate_code(settings.otp_length)):
        print("Success: test email sent. Check the inbox (and spam) for", to_email)
    else:
        print("Failed: the provider rejected the message; see the log output above.")
        print("  - For EU Mailgun accounts set MAILGUN_BASE_URL=https://api.eu.mailgun.net in .env")
        sys.exit(1)


if __name__ == "__main__":
    main()
