"""Font file format validation by extension and magic number."""

from __future__ import annotations

from typing import TYPE_CHECKING, Self

from cachedfonts.core.exceptions import FontFormatError
from cachedfonts.core.models import OPENTYPE, TRUETYPE, FormatDescriptor


if TYPE_CHECKING:
    from collections.abc import Iterable


DEFAULT_FORMATS: tuple[FormatDescriptor, ...] = (TRUETYPE, OPENTYPE)


def file_extension(path: str) -> str:
    """Return the lowercase text after the last "." in path, or ""."""
    index = path.rfind(".")
    if index < 0:
        return ""
    return path[index + 1 :].lower()


class FormatValidator:
    """Checks downloaded files against a fixed table of font formats.

    A file passes if its extension is known, or if its first bytes match
    any known magic number. Either check alone is sufficient.

    Example:
        >>> validator = FormatValidator()
        >>> validator.is_valid_format("x.bin", b"\\x00\\x01\\x00\\x00\\x00rest")
        True
    """

    def __init__(self, formats: Iterable[FormatDescriptor] = DEFAULT_FORMATS) -> None:
        self._formats = tuple(formats)
        self._by_extension = {fmt.extension: fmt for fmt in self._formats}

    @property
    def formats(self) -> tuple[FormatDescriptor, ...]:
        """The format descriptors this validator accepts."""
        return self._formats

    @property
    def supported_extensions(self) -> tuple[str, ...]:
        """Sorted extensions this validator accepts."""
        return tuple(sorted(self._by_extension))

    def with_format(self, descriptor: FormatDescriptor) -> Self:
        """Return a new validator that also accepts descriptor.

        An existing entry with the same extension is replaced.
        """
        kept = [f for f in self._formats if f.extension != descriptor.extension]
        return type(self)([*kept, descriptor])

    def is_valid_format(self, path: str, blob: bytes) -> bool:
        """Check whether a file looks like a supported font.

        Args:
            path: File name or path; only its extension is inspected.
            blob: File contents; only the leading bytes are inspected.

        Returns:
            True if the extension or the magic number is recognized.
        """
        if file_extension(path) in self._by_extension:
            return True
        return any(fmt.matches_header(blob) for fmt in self._formats)

    def enforce(self, path: str, blob: bytes) -> None:
        """Raise FontFormatError unless is_valid_format(path, blob)."""
        if not self.is_valid_format(path, blob):
            raise FontFormatError(path, self.supported_extensions)
