"""
Runtime package providing concurrency support.

- concurrency: reader/writer lock and lock helpers
- safe_collection: lock-guarded wrapper around MapCollection
"""
