# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order notifications, processed asynchronously by Celery.
    """

    @staticmethod
    def send_order_notification(order_id: int, email: str | None = None):
        send_order_notification_task.delay(order_id, email)


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(order_id: int, email: str | None = None):
    """
    Logs the "order placed, we will contact you soon" message.
    A real deployment would hand it to an email/SMS gateway here.
    """
    recipient = email or "guest"
    logger.info(f"[NOTIFICATION] {recipient}: order {order_id} placed, we will contact you soon")

    return {"order_id": order_id, "email": email, "status": "sent"}
