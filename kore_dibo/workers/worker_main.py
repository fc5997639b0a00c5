# kore_dibo/workers/worker_main.py
"""
RQ worker for background delivery, installed as ``kore-dibo-worker``.

The email queue is listed first so verification codes are not held up
behind other jobs.
"""
import argparse
import logging

from rq import Queue, SimpleWorker

from kore_dibo.core.logging_config import setup_logging
from kore_dibo.workers.queue import (
    DEFAULT_QUEUE_NAME,
    EMAIL_QUEUE_NAME,
    get_redis_connection,
)

logger = logging.getLogger(__name__)

QUEUE_NAMES = [EMAIL_QUEUE_NAME, DEFAULT_QUEUE_NAME]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run the delivery worker")
    parser.add_argument(
        "--burst",
        action="store_true",
        help="Drain the queues and exit instead of waiting for new jobs",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging()

    redis_conn = get_redis_connection()
    queues = [Queue(name, connection=redis_conn) for name in QUEUE_NAMES]

    logger.info("Worker listening on %s (burst=%s)", ", ".join(QUEUE_NAMES), args.burst)
    SimpleWorker(queues, connection=redis_conn).work(burst=args.burst)


if __name__ == "__main__":
    main()
