"""Adapters layer for LP Tracker service.

This layer contains all adapters that translate between the core domain
and external systems (database, message bus, Riot API, metrics).
"""
