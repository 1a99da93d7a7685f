"""
Service layer for the HN Digest pipeline.
"""

from .config_manager import ConfigurationManager

__all__ = [
    "ConfigurationManager",
]
