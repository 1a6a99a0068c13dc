# canteen/services/notification_service.py
from decimal import Decimal

from kombu.exceptions import OperationalError

from canteen.celery_worker import celery_app
from canteen.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien o zamowieniach.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, total: Decimal, payment_method: str):
        # zamowienie jest juz zapisane, brak brokera nie moze go cofnac
        try:
            send_order_notification_task.delay(user_id, order_id, str(total), payment_method)
        except OperationalError as e:
            logger.warning(f"Nie udalo sie zakolejkowac powiadomienia dla zamowienia {order_id}: {e}")
            return False
        return True


@celery_app.task(name="canteen.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, total: str, payment_method: str):
    """
    Celery task - potwierdzenie zamowienia dla klienta.
    Kanal (email/SMS) podpinany tutaj, na razie tylko log.
    """
    logger.info(
        f"[NOTIFICATION] User {user_id}: Order {order_id} placed "
        f"(total {total}, payment {payment_method})"
    )

    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
