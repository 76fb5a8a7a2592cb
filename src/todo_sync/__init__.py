"""In-memory task list engine: canonical store, optimistic overlay, deferred views."""

__version__ = "0.1.0"
