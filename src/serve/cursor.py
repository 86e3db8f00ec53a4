"""Round-robin position over manifest files and their rows."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Cursor:
    """Position of the next sample as ``(file_index, row_index)``.

    ``file_index`` indexes the file permutation and ``row_index`` the row
    permutation of the loaded file, never the raw file or row numbers.
    """

    file_index: int = 0
    row_index: int = 0

    def advance(self, row_count: int) -> bool:
        """Step to the next row of the current file.

        Args:
            row_count: Rows in the currently loaded file.

        Returns:
            True when the file was exhausted and ``row_index`` reset to 0.
        """
        self.row_index += 1
        if self.row_index < row_count:
            return False
        self.row_index = 0
        return True

    def next_file(self, num_files: int) -> bool:
        """Step to the next file, wrapping after the last one.

        Args:
            num_files: Number of files in the manifest.

        Returns:
            True when the step wrapped around to the first file.
        """
        self.file_index = (self.file_index + 1) % num_files
        return self.file_index == 0

    def reset(self) -> None:
        self.file_index = 0
        self.row_index = 0
