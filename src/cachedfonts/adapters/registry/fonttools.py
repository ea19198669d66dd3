"""Font registration adapter backed by fontTools."""

from __future__ import annotations

import struct
import threading
from dataclasses import dataclass
from io import BytesIO

from fontTools.ttLib import TTFont, TTLibError

from cachedfonts.core.exceptions import RegistrationError


@dataclass(frozen=True, slots=True)
class RegisteredFont:
    """A font accepted by the registry.

    Attributes:
        family: Family name the font was registered under.
        internal_family: Family name read from the font's own name table.
        style: Subfamily (style) name from the name table, e.g. "Bold".
        data: The font bytes.
    """

    family: str
    internal_family: str
    style: str
    data: bytes


class FontToolsRegistry:
    """In-process font registry that parses fonts with fontTools.

    Implements FontRegistryPort. Each registered font is fully parsed
    enough to read its name table; files fontTools cannot open are
    rejected with RegistrationError. Fonts are grouped by the family name
    they were registered under, in registration order.
    """

    def __init__(self) -> None:
        self._families: dict[str, list[RegisteredFont]] = {}
        self._lock = threading.Lock()

    def register(self, data: bytes, family: str) -> None:
        """Parse font bytes and add them to family.

        Args:
            data: TrueType or OpenType font bytes.
            family: Family name to register under.

        Raises:
            RegistrationError: If fontTools cannot parse the font.
        """
        try:
            font = TTFont(BytesIO(data))
            name_table = font["name"]
            internal_family = name_table.getBestFamilyName() or ""
            style = name_table.getBestSubFamilyName() or ""
        except (TTLibError, KeyError, struct.error, EOFError, AssertionError) as e:
            raise RegistrationError(
                f"Font engine rejected font for family '{family}': {e}",
                family=family,
                cause=e,
            ) from e

        entry = RegisteredFont(
            family=family,
            internal_family=internal_family,
            style=style,
            data=data,
        )
        with self._lock:
            self._families.setdefault(family, []).append(entry)

    def registered(self, family: str) -> list[RegisteredFont]:
        """List fonts registered under family, oldest first."""
        with self._lock:
            return list(self._families.get(family, []))

    @property
    def families(self) -> list[str]:
        """Names of all families with at least one registered font."""
        with self._lock:
            return sorted(self._families)
