#!/usr/bin/env python3
"""
Scribe Service Entrypoint

Runs the FastAPI web server via gunicorn with uvicorn workers. The bind
port comes from PORT (default 8080), the worker count from WEB_CONCURRENCY.
"""

import os

PORT = os.environ.get("PORT", "8080")
WORKERS = os.environ.get("WEB_CONCURRENCY", "2")

print("=" * 50)
print("Scribe Service: web")
print("=" * 50)

cmd = [
    "gunicorn", "scribe.api.main:app",
    "--workers", WORKERS,
    "--worker-class", "uvicorn.workers.UvicornWorker",
    "--bind", f"0.0.0.0:{PORT}",
    "--timeout", "120",
    "--graceful-timeout", "30"
]

print(f"Running: {' '.join(cmd)}")
print("=" * 50)

# Replace this process with the actual command
os.execvp(cmd[0], cmd)
