"""Cache key derivation from font locators."""

from __future__ import annotations

import re


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_QUERY_OR_FRAGMENT = re.compile(r"[?#]")


def derive_cache_key(locator: str) -> str:
    """Derive a filesystem-safe cache key from a locator.

    Removes every character that is not alphanumeric, ".", "_" or "-".
    The full locator is used (scheme, host, path and query), so files with
    the same name served from different hosts or paths get different keys.

    Args:
        locator: Font url (e.g., "https://example.com/fonts/Roboto.ttf").

    Returns:
        Sanitized key, e.g. "httpsexample.comfontsRoboto.ttf".

    Example:
        >>> derive_cache_key("gs://mockurl.appspot.com/a.ttf")
        'gsmockurl.appspot.coma.ttf'
    """
    return _UNSAFE_CHARS.sub("", locator)


def short_name_or_locator(locator: str) -> str:
    """Return the file name of a locator, or the locator if there is none.

    The file name is the last path segment, cut at the first "?" or "#".

    Args:
        locator: Font url.

    Returns:
        File name such as "fontTest3.ttf", or locator unchanged when it has
        no "/" or the last segment is empty.

    Example:
        >>> short_name_or_locator("https://example.com/fontTest3.ttf?v=1&u=2")
        'fontTest3.ttf'
    """
    index = locator.rfind("/")
    if index < 0:
        return locator
    segment = _QUERY_OR_FRAGMENT.split(locator[index + 1 :], maxsplit=1)[0]
    return segment or locator
