"""
Celery app for work that should not block a request (rule text generation).
"""

from celery import Celery

from app.core.config import (
    REDIS_URL, LEAGUE_TIMEZONE, RULE_TASK_QUEUE, RULE_RESULT_EXPIRES_SECONDS,
    RULE_TASK_TIME_LIMIT, RULE_TASK_SOFT_TIME_LIMIT
)

celery_app = Celery(
    "league_night",
    broker=REDIS_URL,
    backend=REDIS_URL,
    include=["app.tasks.rule_tasks"]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone=LEAGUE_TIMEZONE,
    enable_utc=True,
    task_track_started=True,
    task_routes={"generate_rule": {"queue": RULE_TASK_QUEUE}},
    result_expires=RULE_RESULT_EXPIRES_SECONDS,
    task_time_limit=RULE_TASK_TIME_LIMIT,
    task_soft_time_limit=RULE_TASK_SOFT_TIME_LIMIT,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=50,
)
