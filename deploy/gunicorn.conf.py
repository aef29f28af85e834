"""Gunicorn configuration for Classora Analytics.

Usage:
    gunicorn main:app -c deploy/gunicorn.conf.py

Requests are CPU-bound but short (in-memory aggregation over one student's
or one class's records), so workers are sized to cores and timeouts kept low.
"""

import multiprocessing
import os

# ─── Server socket ──────────────────────────────────────────────

bind = os.getenv("BIND", "0.0.0.0:5000")
backlog = 1024

# ─── Worker processes ───────────────────────────────────────────

workers = int(os.getenv("WORKERS", multiprocessing.cpu_count()))
worker_class = "uvicorn.workers.UvicornWorker"

# ─── Timeouts ───────────────────────────────────────────────────

timeout = 30
graceful_timeout = 15
keepalive = 5

# ─── Worker recycling ──────────────────────────────────────────

max_requests = 5000
max_requests_jitter = 500

# ─── Logging ────────────────────────────────────────────────────

accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

proc_name = "classora-analytics"


def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info(
        "Starting Classora Analytics — workers=%d, timeout=%ds, bind=%s",
        workers,
        timeout,
        bind,
    )


def worker_exit(server, worker):
    server.log.info("Worker exit (pid: %s)", worker.pid)
