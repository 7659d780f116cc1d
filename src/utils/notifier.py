import logging
import smtplib
from email.message import EmailMessage

from src.config import settings


def send_email(to: str, subject: str, message: str) -> None:
    """Envía un mail por SMTP. Lanza excepción si falla."""
    if not settings.SMTP_HOST:
        raise RuntimeError("SMTP_HOST not configured")

    msg = EmailMessage()
    msg["From"] = settings.SMTP_FROM
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(message)

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as smtp:
        smtp.starttls()
        if settings.SMTP_USER:
            smtp.login(settings.SMTP_USER, settings.SMTP_PASSWORD or "")
        smtp.send_message(msg)


def notify(to: str, subject: str, message: str) -> bool:
    """Best-effort: loguea el fallo y nunca lo propaga."""
    try:
        send_email(to, subject, message)
        return True
    except Exception as e:
        logging.warning(f"[notifier] Email not sent to {to}: {e}")
        return False
