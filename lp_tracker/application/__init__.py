"""Application layer for LP Tracker.

Holds the tracking service, the command handler with its worker pool and
deadline handling, and the poller that keeps ranks fresh.
"""
