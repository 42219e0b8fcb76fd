"""Celery application configuration."""

from celery import Celery

from app.core.config import settings

# Create Celery instance
celery_app = Celery(
    "photo_delivery",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["app.tasks.notification_tasks"],
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=5 * 60,
    task_soft_time_limit=4 * 60,
    worker_prefetch_multiplier=4,
    worker_max_tasks_per_child=1000,
    # Tests run tasks in-process without a broker
    task_always_eager=settings.is_testing,
)

celery_app.conf.task_routes = {
    "app.tasks.notification_tasks.*": {"queue": "notifications"},
}
