"""Parallel download and streamed family load example.

This example downloads a font family on a thread pool, then loads it one
member at a time so the first style can be used before the rest are ready.
"""

from cachedfonts import FontCache, ThreadPoolExecutorAdapter


URLS = [
    "https://example.com/fonts/Inter-Regular.ttf",
    "https://example.com/fonts/Inter-Medium.ttf",
    "https://example.com/fonts/Inter-Bold.ttf",
    "https://example.com/fonts/Inter-Black.ttf",
]


def report(fraction: float, total: int, loaded: int) -> None:
    print(f"{loaded}/{total} loaded ({fraction:.0%})")


with ThreadPoolExecutorAdapter(max_workers=4) as executor:
    font_cache = FontCache.from_directory(executor=executor)

    # Downloads run in parallel; results keep the order of URLS
    font_cache.cache_fonts(URLS)

# Each member is registered and yielded as soon as it is read
for data in font_cache.load_cached_family_stream(URLS, "Inter", on_progress=report):
    print(f"Ready: {len(data)} bytes")
