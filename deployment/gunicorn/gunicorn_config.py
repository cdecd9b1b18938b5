"""
Gunicorn settings for the portfolio contact backend.

    gunicorn core.wsgi:application -c deployment/gunicorn/gunicorn_config.py
"""
import os

bind = f"0.0.0.0:{os.getenv('PORT', '5000')}"
workers = int(os.getenv('GUNICORN_WORKERS', 2))
worker_class = "sync"
max_requests = 1000
max_requests_jitter = 100
# Covers EMAIL_TIMEOUT for the open + two sends of one submission
timeout = int(os.getenv('GUNICORN_TIMEOUT', 120))
keepalive = 5

# Logging to stdout/stderr for the hosting platform
accesslog = "-"
errorlog = "-"
loglevel = os.getenv('LOG_LEVEL', 'info').lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "portfolio-contact-backend"

# Server hooks
def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting Gunicorn server on %s", bind)

def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Gunicorn server is ready. Spawning workers")

def worker_abort(worker):
    """Called when a worker receives the SIGABRT signal (usually a timeout)."""
    worker.log.info("Worker received SIGABRT signal")
