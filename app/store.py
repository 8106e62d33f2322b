import json
import logging
import os
import stat
import tempfile
from pathlib import Path

from pydantic import ValidationError

from app.errors import StorageError
from app.models import StoreDocument

logger = logging.getLogger(__name__)


class DataStore:
    """
    Single JSON document holding the customers, products and sales collections.

    Every ``load()`` returns a fresh ``StoreDocument``; callers mutate their own
    copy and hand it back to ``save()``, which replaces the whole file. There is
    no locking, so the last writer wins.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    # ── reads ─────────────────────────────────────────────────────────────────

    def load(self) -> StoreDocument:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return StoreDocument()
        except OSError as exc:
            logger.error("Failed to read %s: %s", self.path, exc)
            raise StorageError(f"Failed to load data: {exc}") from exc

        try:
            return StoreDocument.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as exc:
            logger.error("Data file %s is corrupted: %s", self.path, exc)
            raise StorageError(f"Failed to load data: {exc}") from exc

    # ── writes ────────────────────────────────────────────────────────────────

    def save(self, doc: StoreDocument) -> None:
        payload = doc.model_dump(mode="json", by_alias=True)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2)
                os.chmod(tmp_path, self._file_mode())
                os.replace(tmp_path, self.path)
            finally:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
        except OSError as exc:
            logger.error("Failed to write %s: %s", self.path, exc)
            raise StorageError(f"Failed to save data: {exc}") from exc

    def _file_mode(self) -> int:
        # mkstemp creates 0600 files; keep the mode the data file already has
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask


def next_id(records: list) -> int:
    """One past the highest id in ``records``, or 1 for an empty collection."""
    return max((r.id for r in records), default=0) + 1
