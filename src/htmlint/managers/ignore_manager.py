# src/htmlint/managers/ignore_manager.py
import fnmatch
import logging
import posixpath
from pathlib import Path
from typing import Iterable, List, Optional, Union

logger = logging.getLogger(__name__)

IGNORE_FILE_NAME = ".htmlvalidateignore"


class IgnoreManager:
    """
    Handles gitignore-style path exclusion for discovered files.

    Patterns come from a `.htmlvalidateignore` file (searched from a start
    directory upwards) and from extra patterns given on the command line.
    Supported forms:
        dir/                directory anywhere in the path
        **/*.min.html       any depth
        vendor/**           everything under a prefix
        a/**/b.html         prefix and suffix
        *.tmpl              glob on the basename, then on the full path
    Negation lines (`!pattern`) are accepted but never match.
    """

    def __init__(self, patterns: Optional[Iterable[str]] = None):
        self.patterns: List[str] = []
        self.add_patterns(patterns or [])

    @classmethod
    def from_directory(cls, start: Union[str, Path], extra_patterns: Optional[Iterable[str]] = None) -> "IgnoreManager":
        manager = cls()
        ignore_file = cls.find_ignore_file(start)
        if ignore_file is not None:
            manager.load(ignore_file)
        manager.add_patterns(extra_patterns or [])
        return manager

    @staticmethod
    def find_ignore_file(start: Union[str, Path]) -> Optional[Path]:
        """Walks from `start` towards the filesystem root and returns the first ignore file found."""
        current = Path(start).resolve()
        if current.is_file():
            current = current.parent

        for directory in (current, *current.parents):
            candidate = directory / IGNORE_FILE_NAME
            if candidate.is_file():
                return candidate
        return None

    def load(self, ignore_file: Path) -> None:
        try:
            lines = ignore_file.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read ignore file {ignore_file}: {e}")
            return

        self.add_patterns(lines)
        logger.debug(f"Loaded ignore patterns from {ignore_file}")

    def add_patterns(self, patterns: Iterable[str]) -> None:
        for raw in patterns:
            pattern = raw.strip()
            if pattern and not pattern.startswith("#"):
                self.patterns.append(pattern)

    def is_ignored(self, path: Union[str, Path]) -> bool:
        normalized = Path(path).as_posix()
        if normalized.startswith("./"):
            normalized = normalized[2:]
        return any(self.match(pattern, normalized) for pattern in self.patterns)

    @staticmethod
    def match(pattern: str, path: str) -> bool:
        """Matches a single pattern against a slash-separated path."""
        if pattern.startswith("!"):
            return False

        if pattern.endswith("/"):
            directory = pattern.rstrip("/")
            return (
                f"/{directory}/" in path
                or path.startswith(f"{directory}/")
                or path == directory
            )

        basename = posixpath.basename(path)

        if "**" in pattern:
            prefix, _, suffix = pattern.partition("**")
            prefix = prefix.rstrip("/")
            suffix = suffix.lstrip("/")

            if not prefix:
                return fnmatch.fnmatchcase(basename, suffix) or path.endswith(suffix)
            if suffix:
                return path.startswith(prefix) and (
                    path.endswith(suffix) or fnmatch.fnmatchcase(basename, suffix)
                )
            return path.startswith(f"{prefix}/") or path == prefix

        return fnmatch.fnmatchcase(basename, pattern) or fnmatch.fnmatchcase(path, pattern)
