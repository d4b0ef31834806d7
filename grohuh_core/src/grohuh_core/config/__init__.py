from .environments import Environment, Settings, get_settings

__all__ = ["Environment", "Settings", "get_settings"]
