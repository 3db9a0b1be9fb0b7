"""Gunicorn configuration for production deployment.

    gunicorn -c deploy/gunicorn.conf.py webapp.api:app
"""

import multiprocessing
import os

# Server socket
bind = f"{os.getenv('SERVER_HOST', '0.0.0.0')}:{os.getenv('SERVER_PORT', '8080')}"
backlog = 2048

# Worker processes; each worker owns its own DB pool and Redis connection
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
worker_connections = 1000
max_requests = 1000
max_requests_jitter = 50
timeout = 30
keepalive = 5

proc_name = "storefront"

daemon = False
tmp_upload_dir = None

# Logging; the application writes its own JSON lines to stdout
accesslog = None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

graceful_timeout = 30

# The lifespan opens connections per worker, so the app is not preloaded
preload_app = False


def on_starting(server):
    server.log.info("Starting storefront API")


def when_ready(server):
    server.log.info(f"Listening on {bind} with {workers} workers")


def post_fork(server, worker):
    server.log.info(f"Worker spawned (pid: {worker.pid})")


def worker_abort(worker):
    worker.log.warning(f"Worker {worker.pid} aborted (timeout)")


def on_exit(server):
    server.log.info("Shutting down")
