"""
Device Aggregator Services

- device - Per-device polling tasks and value sources
- config - Device set source and hot-reload watcher
- aggregation - Event channel, messages and the value store
- reporting - Periodic summary and HTTP status server
"""
