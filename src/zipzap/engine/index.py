"""
Directory index facade for zipzap.

DirectoryIndex is what shell hooks and command-line front ends talk to. It
reads the clock, canonicalizes paths handed in by the shell, skips the home
and root directories, and forwards to the store and importer.
"""

import time
import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from ..errors import NotFoundError, PreconditionError, StorageError
from ..models.config import ZipzapConfig
from ..models.entry import Entry, ImportResult
from .importer import export_lines, import_text
from .store import Store


logger = logging.getLogger(__name__)


class DirectoryIndex:
    """
    Frecency index of visited directories.

    Example:
        with DirectoryIndex(config) as index:
            index.add("/home/me/src/project")
            index.find(["proj"])
    """

    def __init__(
        self,
        config: Optional[ZipzapConfig] = None,
        clock: Callable[[], float] = time.time,
        home: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize the index.

        Args:
            config: Configuration; defaults are used when omitted
            clock: Source of the current Unix time
            home: Home directory excluded from tracking; defaults to the user's home
        """
        self.config = config or ZipzapConfig()
        self.clock = clock
        self.home = Path(home) if home is not None else Path.home()
        self.store = Store(
            self.config.storage.get_full_path(),
            ranking=self.config.ranking,
            aging=self.config.aging,
            timeout_seconds=self.config.storage.timeout_seconds,
        )

    def open(self) -> 'DirectoryIndex':
        """Open the underlying store, creating it if needed."""
        self.store.open()
        return self

    def close(self) -> None:
        self.store.close()

    def __enter__(self) -> 'DirectoryIndex':
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def now(self) -> int:
        """Current Unix time in whole seconds."""
        return int(self.clock())

    def add(self, path: Union[str, Path]) -> bool:
        """
        Record a visit to a directory.

        Args:
            path: Directory to record; relative paths and symlinks are resolved

        Returns:
            True if the visit was recorded, False if the directory is the
            home or filesystem root and was skipped

        Raises:
            PreconditionError: If the path does not exist
            StorageError: If the visit cannot be written
        """
        try:
            resolved = Path(path).resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise PreconditionError(f"could not find '{path}'") from e

        if self._is_ignored(resolved):
            logger.debug(f"Not tracking {resolved}")
            return False

        self.store.record_visit(str(resolved), self.now())
        return True

    def _is_ignored(self, resolved: Path) -> bool:
        if resolved == resolved.parent:
            return True
        try:
            return resolved == self.home.resolve()
        except OSError:
            return False

    def find(self, tokens: Sequence[str]) -> str:
        """
        Find the best matching directory for a query.

        Raises:
            NotFoundError: If no tokens are given or nothing matches
        """
        tokens = [token for token in tokens if token]
        if not tokens:
            raise NotFoundError("no pattern given")
        return self.store.find_best(tokens, self.now())

    def import_legacy(self, path: Optional[Union[str, Path]] = None, clear: bool = False) -> ImportResult:
        """
        Import a legacy ``z`` data file.

        Timestamps resolve conflicts with existing rows unless ``clear`` is set.

        Args:
            path: File to read; defaults to the configured legacy path
            clear: Whether to delete all existing entries first

        Raises:
            StorageError: If the file cannot be read
            ParseError: If any line is malformed; nothing is imported
        """
        source = Path(path).expanduser() if path is not None else Path(self.config.import_config.legacy_path)
        try:
            text = source.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"could not read '{source}': {e}", source) from e

        logger.info(f"Importing legacy data from {source}")
        return import_text(self.store, text, clear=clear, separator=self.config.import_config.separator)

    def export_legacy(self, path: Union[str, Path]) -> int:
        """
        Write every entry to a file in the legacy ``z`` format.

        Returns:
            Number of entries written

        Raises:
            StorageError: If the file cannot be written
        """
        target = Path(path).expanduser()
        entries = self.store.entries()
        try:
            with open(target, 'w', encoding='utf-8') as f:
                f.writelines(export_lines(entries, self.config.import_config.separator))
        except OSError as e:
            raise StorageError(f"could not write '{target}': {e}", target) from e

        logger.info(f"Exported {len(entries)} entries to {target}")
        return len(entries)

    def db_path(self) -> Path:
        """Get the location of the database file."""
        return self.store.path_to_storage()

    def entries(self) -> List[Entry]:
        """Get all tracked directories ordered by path."""
        return self.store.entries()
