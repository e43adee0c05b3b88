import html
import logging
import smtplib
from email.message import EmailMessage

import requests

from portfolio.config import Settings
from portfolio.schemas import Message

logger = logging.getLogger(__name__)

WEBHOOK_TIMEOUT = 10
SMTP_TIMEOUT = 15


def _connect(settings: Settings) -> smtplib.SMTP:
    # 465 is implicit TLS; anything else upgrades with STARTTLS
    if settings.email_port == 465:
        server = smtplib.SMTP_SSL(settings.email_host, settings.email_port, timeout=SMTP_TIMEOUT)
    else:
        server = smtplib.SMTP(settings.email_host, settings.email_port, timeout=SMTP_TIMEOUT)
        server.starttls()
    server.login(settings.email_user, settings.email_password)
    return server


def build_contact_email(message: Message, settings: Settings) -> EmailMessage:
    formatted_date = message.created_at.strftime("%Y-%m-%d %H:%M UTC")

    email = EmailMessage()
    # header values must be a single line
    subject = " ".join(message.subject.split())
    email["Subject"] = f"New Contact Form Message: {subject}"
    email["From"] = f"Portfolio Website <{settings.email_user}>"
    email["To"] = settings.owner_email
    email["Reply-To"] = message.email

    email.set_content(
        "New Contact Form Submission\n"
        "---------------------------\n"
        f"Date: {formatted_date}\n"
        f"From: {message.name} ({message.email})\n"
        f"Subject: {message.subject}\n\n"
        f"Message:\n{message.message}\n"
    )
    body = html.escape(message.message).replace("\n", "<br>")
    email.add_alternative(
        "<h2>New Contact Form Submission</h2>"
        f"<p><strong>Date:</strong> {formatted_date}</p>"
        f"<p><strong>From:</strong> {html.escape(message.name)} ({html.escape(message.email)})</p>"
        f"<p><strong>Subject:</strong> {html.escape(message.subject)}</p>"
        f"<h3>Message:</h3><p>{body}</p>",
        subtype="html",
    )
    return email


def send_contact_email(message: Message, settings: Settings) -> bool:
    """Email the site owner about a new message.

    Without SMTP settings the message is only logged. Raises on SMTP failure.
    """
    if not settings.email_configured:
        logger.info(
            "New contact message #%s from %s <%s>: %s (email not configured, not sent)",
            message.id, message.name, message.email, message.subject,
        )
        return False

    email = build_contact_email(message, settings)
    server = _connect(settings)
    try:
        server.send_message(email)
    finally:
        server.quit()

    logger.info("Contact notification email sent for message #%s", message.id)
    return True


def post_webhook(message: Message, settings: Settings) -> bool:
    if not settings.webhook_url:
        return False

    payload = {"event": "contact.created", "message": message.model_dump(mode="json", by_alias=True)}
    response = requests.post(settings.webhook_url, json=payload, timeout=WEBHOOK_TIMEOUT)
    response.raise_for_status()

    logger.info("Webhook delivered for message #%s (%s)", message.id, response.status_code)
    return True


def notify_new_message(message: Message, settings: Settings) -> None:
    """Best-effort owner notification. Never raises: the message is already saved."""
    try:
        send_contact_email(message, settings)
    except Exception:
        logger.exception("Error sending contact notification email for message #%s", message.id)

    try:
        post_webhook(message, settings)
    except Exception:
        logger.exception("Error calling webhook for message #%s", message.id)


def verify_email_connection(settings: Settings) -> dict:
    """Check that the SMTP settings can log in. Used by the admin email check."""
    if not settings.email_configured:
        return {
            "success": False,
            "error": "Email is not configured. Set EMAIL_HOST, EMAIL_PORT, EMAIL_USER, EMAIL_PASSWORD and YOUR_EMAIL.",
        }

    try:
        server = _connect(settings)
        server.quit()
        logger.info("Email service is ready to send messages")
        return {"success": True}
    except smtplib.SMTPAuthenticationError as e:
        error = "Authentication failed. Please check your email and password."
        if "gmail" in (settings.email_host or ""):
            error += (
                " For Gmail accounts, you may need to use an App Password instead of your regular password."
                " Visit https://myaccount.google.com/apppasswords to generate one."
            )
        details = {"code": e.smtp_code, "message": str(e)}
    except smtplib.SMTPException as e:
        error = "Connection problem. Please check your email host and port settings."
        details = {"code": getattr(e, "smtp_code", None), "message": str(e)}
    except OSError as e:
        error = "Failed to connect to email server. Please check your network connection and email settings."
        details = {"code": e.errno, "message": str(e)}

    logger.error("Email service configuration error: %s", details["message"])
    return {"success": False, "error": error, "errorDetails": details}
