# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int):
        """
        Wysyła powiadomienie o przyjęciu zamówienia (status PENDING).
        """
        send_order_notification_task.delay(user_id, order_id)


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int):
    """
    Celery task - na razie tylko loguje, kanal (email / push) podpina sie tutaj.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} has been placed")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
