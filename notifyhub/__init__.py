"""Notification records, per-recipient read state and lifecycle events."""
