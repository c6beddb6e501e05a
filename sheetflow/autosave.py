"""Autosave: swap files and the save-status indicator.

While autosave is on, every content change is written to a vim-style swap
file next to the document (``/path/.name.swp``) so a crash loses nothing.
With autosave off, the document is only written on an explicit save.
"""

import logging
import os
import tempfile
import time
from typing import Callable, Optional

from .constants import PaginationConstants

logger = logging.getLogger(__name__)


def get_swap_path(filename: str) -> str:
    """Return the swap file path for a document.

    For /path/to/document.txt returns /path/to/.document.txt.swp
    """
    dir_name = os.path.dirname(filename) or '.'
    swap_name = (
        PaginationConstants.AUTOSAVE_SWAP_PREFIX
        + os.path.basename(filename)
        + PaginationConstants.AUTOSAVE_SWAP_SUFFIX
    )
    return os.path.join(dir_name, swap_name)


def _atomic_write(path: str, content: str) -> bool:
    dir_name = os.path.dirname(path) or '.'
    temp_filename = None
    try:
        with tempfile.NamedTemporaryFile(
            mode='w', encoding='utf-8', dir=dir_name, suffix='.tmp', delete=False
        ) as temp_file:
            temp_filename = temp_file.name
            temp_file.write(content)
            temp_file.flush()
            os.fsync(temp_file.fileno())
        os.replace(temp_filename, path)
        return True
    except OSError as e:
        logger.warning(f"Could not write {path}: {e}")
        if temp_filename is not None:
            try:
                os.remove(temp_filename)
            except OSError:
                pass
        return False


def write_swap_file(filename: str, content: str) -> bool:
    return _atomic_write(get_swap_path(filename), content)


def read_swap_file(filename: str) -> Optional[str]:
    """Return swap file content, or None if it doesn't exist or can't be read."""
    try:
        with open(get_swap_path(filename), 'r', encoding='utf-8') as f:
            return f.read()
    except OSError:
        return None


def delete_swap_file(filename: str) -> None:
    try:
        os.remove(get_swap_path(filename))
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not delete swap file for {filename}: {e}")


def swap_file_exists(filename: str) -> bool:
    return os.path.exists(get_swap_path(filename))


class AutosaveController:
    """Tracks the autosave toggle and the "Saved"/"Saving..." status."""

    def __init__(
        self,
        filename: Optional[str] = None,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.filename = filename
        self.enabled = enabled
        self._clock = clock
        self._saving_until = 0.0

    @property
    def status(self) -> str:
        if self._clock() < self._saving_until:
            return PaginationConstants.SAVING_STATUS
        return PaginationConstants.SAVED_STATUS

    def toggle(self) -> bool:
        self.enabled = not self.enabled
        return self.enabled

    def _mark_saving(self) -> None:
        self._saving_until = self._clock() + PaginationConstants.SAVE_STATUS_DELAY

    def document_changed(self, content: str) -> bool:
        """Write the swap file if autosave is on; return whether it was written."""
        if not self.enabled:
            return False
        self._mark_saving()
        if self.filename is None:
            return False
        return write_swap_file(self.filename, content)

    def save_now(self, content: str) -> bool:
        """Write the document itself and drop its swap file."""
        self._mark_saving()
        if self.filename is None:
            return False
        if not _atomic_write(self.filename, content):
            return False
        delete_swap_file(self.filename)
        return True
