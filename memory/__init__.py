from .reference_cache import ReferenceDataCache

__all__ = ["ReferenceDataCache"]
