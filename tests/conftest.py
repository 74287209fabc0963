import os

# Keep provider HTTP caching in memory so the suite leaves no sqlite files behind.
os.environ.setdefault("SEAROUTE_HTTP_CACHE_BACKEND", "memory")
