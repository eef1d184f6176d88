"""Weather lookup widget: search, forecast view state and recent searches."""

__version__ = "0.1.0"
