"""
Email notifications for new contact submissions.

Every notifier exposes ``send(notification) -> message id`` and raises
``SendError`` when delivery fails.
"""
import logging
import smtplib
from dataclasses import asdict, dataclass
from email.utils import make_msgid

import requests
from django.core.mail import EmailMessage
from django.template.loader import render_to_string
from kombu.exceptions import KombuError

from .exceptions import SendError

logger = logging.getLogger(__name__)

NOTIFICATION_SUBJECT = "Nuevo Mensaje de Contacto ✔"
RESEND_API_URL = "https://api.resend.com/emails"


@dataclass(frozen=True)
class Notification:
    from_email: str
    to: str
    subject: str
    html_body: str

    def as_dict(self):
        return asdict(self)


def build_notification(record, from_email, to):
    html_body = render_to_string('contacts/email/notification.html', {
        'name': record.name,
        'email': record.email,
        'message': record.message,
    })
    return Notification(
        from_email=from_email,
        to=to,
        subject=NOTIFICATION_SUBJECT,
        html_body=html_body,
    )


class SmtpNotifier:
    """Sends through Django's configured email backend (SMTP relay in production)."""

    def __init__(self, connection=None):
        self.connection = connection

    def send(self, notification):
        message_id = make_msgid(domain="portfolio")
        email = EmailMessage(
            subject=notification.subject,
            body=notification.html_body,
            from_email=notification.from_email,
            to=[notification.to],
            headers={"Message-ID": message_id},
            connection=self.connection,
        )
        email.content_subtype = "html"
        try:
            sent = email.send(fail_silently=False)
        except (smtplib.SMTPException, OSError) as e:
            raise SendError(f"SMTP delivery to {notification.to} failed: {e}") from e
        if not sent:
            raise SendError(f"SMTP backend accepted no message for {notification.to}")
        return message_id


class ResendNotifier:
    """Sends through the Resend transactional email HTTP API."""

    def __init__(self, api_key, timeout=10, session=None):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def send(self, notification):
        payload = {
            "from": notification.from_email,
            "to": [notification.to],
            "subject": notification.subject,
            "html": notification.html_body,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            response = self.session.post(RESEND_API_URL, json=payload, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SendError(f"Network error talking to Resend: {e}") from e

        if not response.ok:
            raise SendError(f"Resend API error {response.status_code}: {response.text}")

        try:
            message_id = response.json()["id"]
        except (ValueError, KeyError, TypeError) as e:
            raise SendError(f"Unexpected Resend response: {response.text}") from e
        return message_id


class CeleryNotifier:
    """Hands the notification to a Celery worker and returns the task id."""

    def send(self, notification):
        from .tasks import send_notification

        try:
            result = send_notification.delay(notification.as_dict())
        except KombuError as e:
            raise SendError(f"Could not enqueue notification: {e}") from e
        return result.id
