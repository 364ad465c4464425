"""Realm Shards battle-resolution and progression engine."""
__version__ = "0.4.0"
