"""
Device Value Sources

A value source yields one numeric reading per read. The file-backed
source expects the entire trimmed content to be a floating-point number.
"""

from pathlib import Path

from ...common.exceptions import SourceError


class FileValueSource:
    """Reads a device value from a plain text file"""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read(self) -> float:
        """
        Read and parse the current value.

        Raises:
            SourceError: If the file is unreadable or not a number
        """
        try:
            content = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceError(f"cannot read {self.path}: {e}", path=str(self.path)) from e

        text = content.strip()
        try:
            # float() also accepts digit separators such as "1_000"
            if "_" in text:
                raise ValueError(text)
            return float(text)
        except ValueError as e:
            raise SourceError(
                f"invalid value in {self.path}: {text!r}", path=str(self.path)
            ) from e

    def __repr__(self) -> str:
        return f"FileValueSource({str(self.path)!r})"
