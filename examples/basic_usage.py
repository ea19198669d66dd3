"""Basic single-font load example.

This example shows the simplest usage pattern: create a DynamicFont for a
font url and call load() once at startup. The font is downloaded on the
first run and read from the local cache afterwards.
"""

from datetime import timedelta

from cachedfonts import DynamicFont


font = DynamicFont(
    url="https://example.com/fonts/Lobster-Regular.ttf",
    family="Lobster",
    # Optional retention bounds (defaults: 200 fonts, 365 days)
    max_objects=50,
    stale_period=timedelta(days=30),
)

# Tries the cache first; downloads and caches the font on a miss
fonts = font.load()
print(f"Loaded {len(fonts)} font(s) for {font.family}")

# A family of related files is loaded with family_of(); each url is one
# weight or style, registered under the same family name
roboto = DynamicFont.family_of(
    [
        "https://example.com/fonts/Roboto-Regular.ttf",
        "https://example.com/fonts/Roboto-Bold.ttf",
        "https://example.com/fonts/Roboto-Italic.ttf",
    ],
    family="Roboto",
)
roboto.load()
