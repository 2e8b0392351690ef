import pytest

from vmbench.cache import AssetCache
from vmbench.middleware import InterceptedLoader


@pytest.mark.asyncio
async def test_cache_interceptor_short_circuits_repeat_loads():
    fetched = []

    async def load_costume(md5, extension):
        fetched.append(md5)
        return {"md5": md5, "ext": extension, "layers": [1, 2]}

    cache = AssetCache()
    loader = InterceptedLoader(None, load_costume)
    loader.on_before_load(cache.interceptor(lambda args: tuple(args)))

    first = await loader("abc123", "svg")
    first["layers"].append(3)
    second = await loader("abc123", "svg")
    await loader("def456", "png")

    assert fetched == ["abc123", "def456"]
    assert second == {"md5": "abc123", "ext": "svg", "layers": [1, 2]}
    assert (cache.hits, cache.misses) == (1, 2)
    assert len(cache) == 2


@pytest.mark.asyncio
async def test_failed_load_is_not_cached():
    async def load_sound(md5):
        raise FileNotFoundError(md5)

    cache = AssetCache()
    loader = InterceptedLoader(None, load_sound)
    loader.on_before_load(cache.interceptor(lambda args: args[0]))

    with pytest.raises(FileNotFoundError):
        await loader("missing")

    assert "missing" not in cache
