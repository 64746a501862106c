"""Configuration module for the Box client."""
from .settings import BoxSettings, load_settings

__all__ = ["BoxSettings", "load_settings"]
