from mediavault.core.context import AppContext, CacheConfig

__all__ = [
    "AppContext",
    "CacheConfig",
]
