"""
Archive dispatch by platform and file suffix.

Each downloaded artifact is handed to the extraction strategy registered
for (platform, suffix). Self-installing executables and disk images pass
through untouched; the installer deals with them.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Tuple, Union

from vulkankit.core import filesystem
from vulkankit.core.exceptions import UnsupportedFileTypeError, UnsupportedPlatformError
from vulkankit.core.platform import LINUX, LINUX_ARM, MAC, WINDOWS, WINDOWS_ARM

logger = logging.getLogger(__name__)

Strategy = Callable[[Path, Path], Path]


def _passthrough(archive_path: Path, destination: Path) -> Path:
    return destination


def _zip(archive_path: Path, destination: Path) -> Path:
    return filesystem.extract_zip(archive_path, destination)


def _7z(archive_path: Path, destination: Path) -> Path:
    return filesystem.extract_7z(archive_path, destination)


def _tar_gz(archive_path: Path, destination: Path) -> Path:
    return filesystem.extract_tar(archive_path, destination)


def _tar_xz(archive_path: Path, destination: Path) -> Path:
    return filesystem.extract_tar(archive_path, destination, compression="xz")


_WINDOWS_STRATEGIES: Dict[str, Strategy] = {
    ".exe": _passthrough,
    ".zip": _zip,
    ".7z": _7z,
}

_MAC_STRATEGIES: Dict[str, Strategy] = {
    ".dmg": _passthrough,
    ".zip": _zip,
}

_LINUX_STRATEGIES: Dict[str, Strategy] = {
    ".tar.gz": _tar_gz,
    ".tar.xz": _tar_xz,
}

STRATEGIES: Dict[Tuple[str, str], Strategy] = {}
for _platform, _table in (
    (WINDOWS, _WINDOWS_STRATEGIES),
    (WINDOWS_ARM, _WINDOWS_STRATEGIES),
    (MAC, _MAC_STRATEGIES),
    (LINUX, _LINUX_STRATEGIES),
    (LINUX_ARM, _LINUX_STRATEGIES),
):
    for _suffix, _strategy in _table.items():
        STRATEGIES[(_platform, _suffix)] = _strategy

SUPPORTED_PLATFORMS = frozenset(platform_id for platform_id, _ in STRATEGIES)


def archive_suffix(path: Union[str, Path]) -> str:
    """
    Get the dispatch suffix of a file, '.tar.gz' style for tarballs.

    Example:
        >>> archive_suffix("vulkansdk-linux-x86_64.tar.xz")
        '.tar.xz'
    """
    suffixes = [s.lower() for s in Path(path).suffixes]
    if len(suffixes) >= 2 and suffixes[-2] == ".tar":
        return "".join(suffixes[-2:])
    return suffixes[-1] if suffixes else ""


def extract(
    file_path: Union[str, Path],
    destination: Union[str, Path],
    platform_id: str,
) -> Path:
    """
    Extract an artifact with the strategy registered for its platform and suffix.

    Args:
        file_path: Downloaded artifact
        destination: Extraction directory
        platform_id: Platform id ('windows', 'warm', 'linux', 'linux-arm', 'mac')

    Returns:
        The destination directory

    Raises:
        UnsupportedPlatformError: If platform_id is not recognized
        UnsupportedFileTypeError: If the platform has no strategy for the suffix
    """
    file_path = Path(file_path)
    destination = Path(destination)

    if platform_id not in SUPPORTED_PLATFORMS:
        raise UnsupportedPlatformError(platform_id, f"cannot extract {file_path.name}")

    strategy = STRATEGIES.get((platform_id, archive_suffix(file_path)))
    if strategy is None:
        raise UnsupportedFileTypeError(str(file_path), platform_id)

    logger.debug(f"Extracting {file_path} to {destination}")
    return strategy(file_path, destination)
