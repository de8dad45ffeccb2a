from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from openmic.core.config import get_redis_url
from openmic.core.logging_config import setup_logging


def make_celery(app_name: str = "openmic") -> Celery:
    """Celery app for outgoing email; Redis is both broker and result backend."""
    redis_url = get_redis_url()
    celery = Celery(app_name, broker=redis_url, backend=redis_url, include=["openmic.tasks"])
    celery.conf.task_serializer = "json"
    celery.conf.result_serializer = "json"
    celery.conf.accept_content = ["json"]
    celery.conf.result_persistent = False
    # email tasks are fire-and-forget
    celery.conf.task_ignore_result = True
    celery.conf.task_soft_time_limit = 30
    celery.conf.task_time_limit = 60
    celery.conf.broker_connection_retry_on_startup = True
    return celery


@celery_setup_logging.connect
def configure_worker_logging(**kwargs):
    setup_logging()


celery_app = make_celery()
