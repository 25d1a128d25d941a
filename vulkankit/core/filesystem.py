"""
File system utilities for VulkanKit.

This module provides the file operations the installers build on:
- Archive extraction primitives (zip, tar.gz, tar.xz, 7z)
- Safe file operations (safe deletion, recursive copy, loose file pruning)
- Polling helpers that wait for slow file system propagation on CI runners

Archive members are validated before extraction to block directory
traversal.
"""

import logging
import os
import shutil
import stat
import tarfile
import tempfile
import time
import zipfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, List, Union

import py7zr
from py7zr.exceptions import Bad7zFile

from vulkankit.core.exceptions import VulkanKitError

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"


# ============================================================================
# Errors
# ============================================================================


class FilesystemError(VulkanKitError):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not member_path.is_relative_to(destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_zip(archive_path: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Extract a ZIP archive.

    Args:
        archive_path: Path to the .zip file
        destination: Directory to extract to (created if missing)

    Returns:
        The destination directory

    Raises:
        ArchiveExtractionError: If the archive is missing or corrupt
    """
    archive_path, destination = _prepare(archive_path, destination)
    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            members = zf.infolist()
            for member in members:
                _validate_archive_path(member.filename, destination)
            zf.extractall(destination)

            if not IS_WINDOWS:
                for member in members:
                    _restore_unix_mode(zf, member, destination)
    except InsecureArchiveError:
        raise
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e
    return destination


def _restore_unix_mode(zf: zipfile.ZipFile, member: zipfile.ZipInfo, destination: Path) -> None:
    """
    Re-apply the Unix mode of a zip member created on a Unix host.

    zipfile does not restore permissions or symlinks. The macOS SDK zip
    holds an installer app whose executable and framework links depend on
    both.
    """
    if member.create_system != 3:
        return

    mode = member.external_attr >> 16
    if not mode or member.is_dir():
        return

    target = destination / member.filename
    if stat.S_ISLNK(mode):
        link = zf.read(member).decode("utf-8")
        _validate_archive_path(
            os.path.join(os.path.dirname(member.filename), link), destination
        )
        target.unlink()
        os.symlink(link, target)
        return

    os.chmod(target, stat.S_IMODE(mode) & 0o777)


def extract_tar(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    compression: str = "gz",
) -> Path:
    """
    Extract a compressed tar archive.

    Args:
        archive_path: Path to the tar file
        destination: Directory to extract to (created if missing)
        compression: Compression filter ('gz' or 'xz')

    Returns:
        The destination directory

    Example:
        >>> extract_tar("vulkansdk.tar.xz", "/home/runner/vulkan-sdk", compression="xz")
    """
    archive_path, destination = _prepare(archive_path, destination)
    try:
        with tarfile.open(archive_path, f"r:{compression}") as tar:
            for member in tar.getmembers():
                _validate_archive_path(member.name, destination)

            tar.extractall(destination, filter="data")
    except InsecureArchiveError:
        raise
    except (tarfile.TarError, OSError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e
    return destination


def extract_7z(archive_path: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Extract a .7z archive.

    Returns:
        The destination directory
    """
    archive_path, destination = _prepare(archive_path, destination)
    try:
        with py7zr.SevenZipFile(archive_path, "r") as archive:
            for member in archive.getnames():
                _validate_archive_path(member, destination)
            archive.extractall(destination)
    except InsecureArchiveError:
        raise
    except (Bad7zFile, OSError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e
    return destination


def _prepare(archive_path: Union[str, Path], destination: Union[str, Path]):
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)
    return archive_path, destination


# ============================================================================
# Safe File Operations
# ============================================================================


def safe_rmtree(path: Union[str, Path]) -> None:
    """
    Remove a directory tree, handling read-only files on Windows.

    Missing paths are ignored.

    Raises:
        FilesystemError: If path is not a directory or deletion fails
    """
    path = Path(path)

    if not path.exists():
        return

    if not path.is_dir():
        raise FilesystemError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:

            def handle_remove_readonly(func, target, exc):
                """Error handler for Windows read-only files."""
                if not os.access(target, os.W_OK):
                    os.chmod(target, 0o777)
                    func(target)
                else:
                    raise exc

            shutil.rmtree(path, onexc=handle_remove_readonly)
        else:
            shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"Failed to remove directory '{path}': {e}") from e


def recursive_copy(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Copy the contents of a directory tree into destination.

    Existing files in destination are overwritten.

    Raises:
        FilesystemError: If source is missing or not a directory
    """
    source = Path(source)
    destination = Path(destination)

    if not source.exists():
        raise FilesystemError(f"Source does not exist: {source}")

    if not source.is_dir():
        raise FilesystemError(f"Source is not a directory: {source}")

    destination.mkdir(parents=True, exist_ok=True)

    for item in source.rglob("*"):
        dest_item = destination / item.relative_to(source)
        if item.is_dir():
            dest_item.mkdir(parents=True, exist_ok=True)
        else:
            dest_item.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, dest_item)


def remove_folders_if_exist(folders: Iterable[Union[str, Path]]) -> List[Path]:
    """
    Remove each folder that exists.

    Failures are logged and do not stop the remaining removals.

    Returns:
        Folders that were deleted
    """
    removed = []
    for folder in folders:
        folder = Path(folder)
        if not folder.exists():
            logger.info(f"Folder {folder} doesn't exist.")
            continue
        try:
            safe_rmtree(folder)
        except FilesystemError as e:
            logger.error(f"Error removing folder: {e}")
            continue
        logger.info(f"Deleted folder: {folder}")
        removed.append(folder)
    return removed


def delete_files_in_folder(folder: Union[str, Path]) -> List[Path]:
    """
    Delete the files directly inside folder.

    Subdirectories are skipped and never recursed into.

    Returns:
        Files that were deleted
    """
    deleted = []
    for entry in sorted(Path(folder).iterdir()):
        if entry.is_dir():
            continue
        entry.unlink()
        logger.info(f"Deleted file: {entry}")
        deleted.append(entry)
    return deleted


def wait_for_entries(
    directory: Union[str, Path],
    timeout: float = 10.0,
    initial_delay: float = 0.1,
    max_delay: float = 2.0,
) -> List[Path]:
    """
    Poll a directory until it contains at least one entry.

    Freshly extracted trees on CI runners can take a moment to show up in
    directory listings. The delay doubles after each empty poll, capped at
    max_delay, until timeout seconds have elapsed.

    Args:
        directory: Directory to poll
        timeout: Total time to wait in seconds
        initial_delay: First delay between polls
        max_delay: Upper bound for the delay between polls

    Returns:
        Sorted directory entries

    Raises:
        FilesystemError: If the directory is still empty after timeout
    """
    directory = Path(directory)
    deadline = time.monotonic() + timeout
    delay = initial_delay

    while True:
        if directory.is_dir():
            entries = sorted(directory.iterdir())
            if entries:
                return entries

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise FilesystemError(
                f"Timed out after {timeout:.1f}s waiting for files in {directory}"
            )

        logger.debug(f"Waiting {delay:.2f}s for files to appear in {directory}")
        time.sleep(min(delay, remaining))
        delay = min(delay * 2, max_delay)


@contextmanager
def temporary_directory(prefix: str = "vulkankit_", cleanup: bool = True):
    """
    Context manager for temporary directory with automatic cleanup.

    Example:
        >>> with temporary_directory() as tmp:
        ...     (tmp / 'file.txt').write_text('test')
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))

    try:
        yield temp_dir
    finally:
        if cleanup and temp_dir.exists():
            safe_rmtree(temp_dir)


__all__ = [
    "IS_WINDOWS",
    "FilesystemError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "extract_zip",
    "extract_tar",
    "extract_7z",
    "safe_rmtree",
    "recursive_copy",
    "remove_folders_if_exist",
    "delete_files_in_folder",
    "wait_for_entries",
    "temporary_directory",
]
