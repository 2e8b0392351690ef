from .asset_cache import AssetCache

__all__ = ["AssetCache"]
