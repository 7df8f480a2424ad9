"""
Adapters package - External service connections.
Text-generation HTTP client and the Redis cache.
"""

from adapters import cache_adapter
from adapters.text_generation_client import TextGenerationClient

__all__ = [
    "cache_adapter",
    "TextGenerationClient",
]
