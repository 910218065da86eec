"""Version comparison for the self-updater.

Versions are compared as dot-separated integers, component by
component. This is deliberately not semver aware: "1.10" is newer than
"1.9" and "1.2" equals "1.2.0".
"""


def _components(version: str) -> list[int]:
    """Split a version string into integer components.

    A leading ``v``/``V`` is stripped and non-numeric components are
    dropped.
    """
    cleaned = version.strip().lstrip("vV")
    return [int(part) for part in cleaned.split(".") if part.isdigit()]


def compare_versions(version1: str, version2: str) -> int:
    """Compare two version strings.

    Returns -1 if version1 < version2, 0 if equal, 1 if version1 > version2.
    Missing trailing components count as zero.
    """
    v1_parts = _components(version1)
    v2_parts = _components(version2)
    max_len = max(len(v1_parts), len(v2_parts))
    v1_parts.extend([0] * (max_len - len(v1_parts)))
    v2_parts.extend([0] * (max_len - len(v2_parts)))

    if v1_parts < v2_parts:
        return -1
    if v1_parts > v2_parts:
        return 1
    return 0


def is_newer_version(latest: str, current: str) -> bool:
    """Return True if ``latest`` is strictly newer than ``current``.

    Examples:
        >>> is_newer_version("1.10.0", "1.9.0")
        True
        >>> is_newer_version("1.2", "1.2.0")
        False
        >>> is_newer_version("v2.0", "1.9.9")
        True

    """
    return compare_versions(latest, current) > 0
