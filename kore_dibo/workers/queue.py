# kore_dibo/workers/queue.py

from typing import Any, Callable

from redis import Redis
from rq import Queue

from kore_dibo.core.config import settings

DEFAULT_QUEUE_NAME = "default"
EMAIL_QUEUE_NAME = "email"

_redis_conn: Redis | None = None


def get_redis_connection() -> Redis:
    global _redis_conn
    if _redis_conn is None:
        _redis_conn = Redis.from_url(settings.REDIS_URL)
    return _redis_conn


def get_queue(name: str = DEFAULT_QUEUE_NAME) -> Queue:
    return Queue(name, connection=get_redis_connection())


def enqueue_job(
    func: Callable[..., Any],
    *args: Any,
    queue_name: str = DEFAULT_QUEUE_NAME,
    **kwargs: Any,
) -> str | None:
    """
    Hand a job to the RQ worker, or run it in-process when the queue is
    disabled (local development and tests).
    """
    if not settings.USE_TASK_QUEUE:
        func(*args, **kwargs)
        return None

    q = get_queue(queue_name)
    job = q.enqueue(func, *args, **kwargs)
    return job.id


def enqueue_verification_email(email: str, code: str) -> str | None:
    from kore_dibo.workers.tasks import send_verification_code_task

    return enqueue_job(
        send_verification_code_task, email, code, queue_name=EMAIL_QUEUE_NAME
    )
