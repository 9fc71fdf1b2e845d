import os

# Bind to the port provided via the PORT environment variable, defaulting to
# 5000.
bind = f"0.0.0.0:{os.getenv('PORT', '5000')}"

# Each request runs one short statement against the database, so plain sync
# workers are enough.
worker_class = "sync"

# The default SimpleCache lives inside one process: invalidating the invoice
# listing in one worker would not reach the others.  Run a single worker
# unless the cache is shared (e.g. CACHE_TYPE=RedisCache).
PROCESS_LOCAL_CACHES = {"SimpleCache", "simple", "NullCache", "null"}
workers = int(os.getenv("WEB_CONCURRENCY", "1"))
if workers > 1 and os.getenv("CACHE_TYPE", "SimpleCache") in PROCESS_LOCAL_CACHES:
    raise RuntimeError(
        "WEB_CONCURRENCY > 1 needs a shared CACHE_TYPE such as RedisCache"
    )

# Requests wait on a single database round trip; anything slower than this
# is treated as a hung worker.
timeout = int(os.getenv("GUNICORN_TIMEOUT", "30"))

wsgi_app = "run:app"
