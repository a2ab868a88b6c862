"""
Contact submission pipeline: extract, persist, notify, respond.

Persisting is the only step that can fail a submission. Notification is
always awaited but its failures are logged and absorbed, so a visitor whose
message was stored is redirected to the thank-you page either way.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.urls import reverse

from .exceptions import StorageError
from .notifier import CeleryNotifier, ResendNotifier, SmtpNotifier, build_notification
from .records import ContactRecord
from .storage import DatabaseStorage, JsonFileStorage

logger = logging.getLogger(__name__)

SMTP_BACKEND = "django.core.mail.backends.smtp.EmailBackend"


@dataclass(frozen=True)
class SubmissionOutcome:
    status: int
    location: Optional[str] = None

    @classmethod
    def redirected(cls, location):
        return cls(status=302, location=location)

    @classmethod
    def server_error(cls):
        return cls(status=500)

    @property
    def is_redirect(self):
        return self.status == 302


class SubmissionPipeline:
    def __init__(self, storage, notifier, sender, recipient, success_url=None):
        self.storage = storage
        self.notifier = notifier
        self.sender = sender
        self.recipient = recipient
        self.success_url = success_url

    def handle(self, fields):
        record = ContactRecord.from_form(fields)

        try:
            stored_id = self.storage.append(record)
        except StorageError:
            logger.exception("Error al guardar el contacto de %s <%s>", record.name, record.email)
            return SubmissionOutcome.server_error()
        logger.info("Contacto guardado con ID: %s", stored_id)

        self.notify(record.with_id(stored_id))
        return SubmissionOutcome.redirected(self.success_url or reverse('gracias'))

    def notify(self, record):
        try:
            notification = build_notification(record, self.sender, self.recipient)
            message_id = self.notifier.send(notification)
        except Exception:
            logger.exception("Error enviando correo para el contacto %s", record.id)
            return None
        logger.info("Correo de notificación enviado (%s).", message_id)
        return message_id


def build_storage():
    backend = settings.CONTACT_STORAGE
    if backend == "file":
        if not settings.CONTACT_FILE_PATH:
            raise ImproperlyConfigured("CONTACT_FILE_PATH must be set when CONTACT_STORAGE is 'file'.")
        return JsonFileStorage(settings.CONTACT_FILE_PATH)
    if backend == "database":
        return DatabaseStorage()
    raise ImproperlyConfigured(f"Unknown CONTACT_STORAGE {backend!r}; expected 'file' or 'database'.")


def build_delivery_notifier():
    backend = settings.CONTACT_NOTIFIER
    if backend == "smtp":
        if settings.EMAIL_BACKEND == SMTP_BACKEND and not (settings.EMAIL_HOST_USER and settings.EMAIL_HOST_PASSWORD):
            raise ImproperlyConfigured("EMAIL_USER and EMAIL_PASSWORD must be set to send through SMTP.")
        return SmtpNotifier()
    if backend == "resend":
        if not settings.RESEND_API_KEY:
            raise ImproperlyConfigured("RESEND_API_KEY must be set when CONTACT_NOTIFIER is 'resend'.")
        return ResendNotifier(settings.RESEND_API_KEY)
    raise ImproperlyConfigured(f"Unknown CONTACT_NOTIFIER {backend!r}; expected 'smtp' or 'resend'.")


def build_pipeline():
    """Build the pipeline from settings, raising ``ImproperlyConfigured`` on bad config."""
    if not settings.CONTACT_RECIPIENT:
        raise ImproperlyConfigured("EMAIL_USER must be set to receive contact notifications.")
    if not settings.CONTACT_FROM_EMAIL:
        raise ImproperlyConfigured("CONTACT_FROM_EMAIL must be set.")

    storage = build_storage()
    # validate delivery config even when a worker does the sending
    delivery = build_delivery_notifier()
    notifier = CeleryNotifier() if settings.CONTACT_NOTIFY_ASYNC else delivery

    return SubmissionPipeline(
        storage=storage,
        notifier=notifier,
        sender=settings.CONTACT_FROM_EMAIL,
        recipient=settings.CONTACT_RECIPIENT,
    )
