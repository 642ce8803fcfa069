"""
Run a Celery worker that serves the rule generation queue.
"""

import argparse
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.celery_app import celery_app
from app.core.config import RULE_TASK_QUEUE, REDIS_URL


def main():
    parser = argparse.ArgumentParser(description='League Night Operations Celery worker')
    parser.add_argument('--concurrency', type=int, default=2)
    parser.add_argument('--loglevel', default='info')
    args = parser.parse_args()

    print("=" * 60)
    print("League Night Operations - Celery Worker")
    print(f"Broker: {REDIS_URL}")
    print(f"Queue:  {RULE_TASK_QUEUE}")
    print("=" * 60)

    celery_app.worker_main([
        "worker",
        f"--loglevel={args.loglevel}",
        f"--concurrency={args.concurrency}",
        f"--queues={RULE_TASK_QUEUE}",
        "--pool=solo" if os.name == "nt" else "--pool=prefork"  # prefork is unavailable on Windows
    ])


if __name__ == "__main__":
    main()
