"""
Delivery tasks for the worker.
These run on RQ workers when USE_TASK_QUEUE is enabled, inline otherwise.
"""

import logging
import smtplib
from email.message import EmailMessage

from kore_dibo.core.config import settings

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify your email - Assignment Kore Dibo"


def render_verification_email(email: str, code: str) -> dict:
    """
    Build the verification message for ``email``.

    Returns:
        Dictionary with sender, recipient, subject and html body
    """
    body = (
        "<h1>Email Verification</h1>"
        f"<p>Your verification code is: <strong>{code}</strong></p>"
        f"<p>This code will expire in {settings.VERIFICATION_CODE_TTL_MINUTES} minutes.</p>"
    )
    return {
        "from": settings.MAIL_SENDER,
        "to": email,
        "subject": VERIFICATION_SUBJECT,
        "html": body,
    }


def send_mail(message: dict) -> None:
    """Deliver a rendered message over the configured SMTP server."""
    mail = EmailMessage()
    mail["From"] = message["from"]
    mail["To"] = message["to"]
    mail["Subject"] = message["subject"]
    mail.set_content("This message requires an HTML capable mail client.")
    mail.add_alternative(message["html"], subtype="html")

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as smtp:
        if settings.SMTP_STARTTLS:
            smtp.starttls()
        if settings.SMTP_USERNAME:
            smtp.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD or "")
        smtp.send_message(mail)


def send_verification_code_task(email: str, code: str) -> dict:
    """
    Worker task that dispatches a verification code.

    With SMTP_HOST set the message is mailed; SMTP errors propagate so RQ
    records the job as failed. Without it the code goes to the log so a
    local sign-up can still be completed.
    """
    message = render_verification_email(email, code)

    if not settings.SMTP_HOST:
        logger.warning(
            "No mail transport configured; verification code for %s is %s", email, code
        )
        return {"status": "logged", "email": email, "subject": message["subject"]}

    send_mail(message)
    logger.info("Verification code mailed to %s", email)
    return {"status": "sent", "email": email, "subject": message["subject"]}
