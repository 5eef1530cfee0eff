# bookshop/celery_worker.py
from celery import Celery

from bookshop.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CART_SWEEP_INTERVAL_SECONDS,
)

celery_app = Celery(
    "bookshop",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

#tasks have to be imported explicitly so celery registers them
celery_app.conf.imports = (
    "bookshop.tasks.expire",
)

celery_app.conf.beat_schedule = {
    "clean-expired-carts": {
        "task": "bookshop.tasks.expire.clean_expired_carts_task",
        "schedule": float(CART_SWEEP_INTERVAL_SECONDS),
    },
}

celery_app.conf.timezone = "UTC"
