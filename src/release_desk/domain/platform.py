"""App Store platforms and their display ordering."""

from collections.abc import Iterable
from enum import Enum

from release_desk.exceptions import DecodeError


class Platform(Enum):
    """Platforms an App Store version can target.

    Values are the App Store Connect wire values. Member order is the
    fixed display precedence used whenever platforms are shown.
    """

    IOS = "IOS"
    MAC_OS = "MAC_OS"
    TV_OS = "TV_OS"
    VISION_OS = "VISION_OS"
    WATCH_OS = "WATCH_OS"

    @property
    def display_name(self) -> str:
        """Human readable platform name."""
        return _DISPLAY_NAMES[self]

    @property
    def display_order(self) -> int:
        """Position in the display precedence table."""
        return _PRECEDENCE.index(self)

    @classmethod
    def from_wire(cls, value: str) -> "Platform":
        """Map an API value such as ``"MAC_OS"`` to a Platform.

        Raises:
            DecodeError: If the value is not a known platform

        """
        try:
            return cls(value)
        except ValueError:
            msg = f"Unknown platform value: {value!r}"
            raise DecodeError(msg) from None

    @classmethod
    def guess_from_bundle_id(cls, bundle_id: str) -> "Platform":
        """Guess a platform from bundle identifier naming conventions.

        Only used for apps that have no versions to read a platform from.
        """
        lowered = bundle_id.lower()
        if "watch" in lowered:
            return cls.WATCH_OS
        if "tv" in lowered:
            return cls.TV_OS
        if "mac" in lowered:
            return cls.MAC_OS
        return cls.IOS


_PRECEDENCE: tuple[Platform, ...] = tuple(Platform)

_DISPLAY_NAMES = {
    Platform.IOS: "iOS",
    Platform.MAC_OS: "macOS",
    Platform.TV_OS: "tvOS",
    Platform.VISION_OS: "visionOS",
    Platform.WATCH_OS: "watchOS",
}


def sorted_for_display(platforms: Iterable[Platform]) -> list[Platform]:
    """Deduplicate platforms and order them by display precedence.

    Args:
        platforms: Platforms in any order, duplicates allowed

    Returns:
        Each platform once, in precedence order

    """
    return sorted(set(platforms), key=lambda p: p.display_order)
