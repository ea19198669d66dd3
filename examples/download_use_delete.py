"""Manual cache control example.

This example uses FontCache directly: download a font, check the cache,
load it into the registry, and finally delete it.
"""

from cachedfonts import FontCache


URL = "https://example.com/fonts/Hurricane-Regular.ttf"

# Auto-discovers the project root and caches under .fonts/
# (or CACHEDFONTS_DIR, see CacheSettings.from_env)
font_cache = FontCache.from_directory()
font_cache.toggle_verbose_logging(True)

font_cache.cache_font(URL)

if font_cache.can_load_font(URL):
    font_cache.load_cached_font(URL, family="Hurricane")

# Registered fonts are available through the registry
for registered in font_cache.registry.registered("Hurricane"):
    print(f"{registered.internal_family} {registered.style}: {len(registered.data)} bytes")

font_cache.remove_cached_font(URL)
