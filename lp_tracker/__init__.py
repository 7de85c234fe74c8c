"""LP Tracker: tracks League of Legends ranked standings of registered players."""

__version__ = "0.1.0"
