# bookshop/tasks/expire.py
from datetime import timedelta

from bookshop.celery_worker import celery_app
from bookshop.data.database import SessionLocal
from bookshop.services.cart_engine import CartEngine
from bookshop.services.cart_service import CartService
from bookshop.utils.settings import CART_TTL_SECONDS
from bookshop.utils.logging import get_logger

logger = get_logger(__name__)


@celery_app.task(name="bookshop.tasks.expire.clean_expired_carts_task")
def clean_expired_carts_task():
    logger.info("Clean expired carts task started")

    service = CartService(CartEngine(SessionLocal))
    removed = service.clean_expired_carts(timedelta(seconds=CART_TTL_SECONDS))

    logger.info("Clean expired carts task finished", removed=removed, ttl_seconds=CART_TTL_SECONDS)
    return removed
