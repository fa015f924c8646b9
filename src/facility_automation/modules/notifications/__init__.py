"""
Notification module for facility-automation.

Pushes the full facility snapshot to every subscribed observer whenever the
engine reports a change.
"""

from .hub import NotificationHub, Observer, Snapshot

__all__ = ["NotificationHub", "Observer", "Snapshot"]
