import logging

from celery import shared_task

from .exceptions import SendError
from .notifier import Notification

logger = logging.getLogger(__name__)


@shared_task
def send_notification(payload):
    from .services import build_delivery_notifier

    notification = Notification(**payload)
    notifier = build_delivery_notifier()
    try:
        message_id = notifier.send(notification)
    except SendError:
        logger.exception("Error enviando correo de notificación a %s", notification.to)
        return None
    logger.info("Correo de notificación enviado (%s).", message_id)
    return message_id
