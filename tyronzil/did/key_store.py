"""
Local storage for DID operation keys.

The store is one JSON document, ``{"dids": {<did>: <entry>}}``, guarded by a
``.lock`` file so concurrent tyronzil processes never interleave writes.
Entries hold private JWKs: the file is created owner-only.
"""
import json
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

import portalocker

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = Path("~/.tyronzil/keys.json")
LOCK_TIMEOUT = 10


def _empty() -> Dict[str, Any]:
    return {"dids": {}}


class KeyStore:
    """Process-safe JSON store of the operation keys of each DID"""

    def __init__(self, store_path: Optional[str] = None):
        """
        Args:
            store_path: Optional custom path, otherwise TYRONZIL_KEY_STORE_PATH
                or ~/.tyronzil/keys.json
        """
        path = store_path or os.environ.get("TYRONZIL_KEY_STORE_PATH") or DEFAULT_STORE_PATH
        self.store_path = Path(path).expanduser()
        self.lock_path = self.store_path.with_name(self.store_path.name + ".lock")
        self._create()

    def _create(self) -> None:
        directory = self.store_path.parent
        if not directory.exists():
            directory.mkdir(mode=0o700, parents=True)
            directory.chmod(0o700)

        if not self.store_path.exists():
            self.store_path.write_text(json.dumps(_empty()))
        if os.name == "posix":
            self.store_path.chmod(0o600)
        else:
            logger.info("File permissions of %s cannot be restricted to the current user", self.store_path)

    @contextmanager
    def _locked(self) -> Iterator[None]:
        with portalocker.Lock(str(self.lock_path), timeout=LOCK_TIMEOUT):
            yield

    def _load(self) -> Dict[str, Any]:
        try:
            data = json.loads(self.store_path.read_text())
        except (json.JSONDecodeError, FileNotFoundError):
            logger.warning("Key store %s is unreadable, starting empty", self.store_path)
            return _empty()
        data.setdefault("dids", {})
        return data

    def _dump(self, data: Dict[str, Any]) -> None:
        self.store_path.write_text(json.dumps(data, indent=2))

    def read(self) -> Dict[str, Any]:
        with self._locked():
            return self._load()

    def write(self, data: Dict[str, Any]) -> None:
        with self._locked():
            self._dump(data)

    def save(self, did: str, entry: Dict[str, Any]) -> None:
        """
        Store or replace the entry of a DID.

        The read and the write happen under one lock.
        """
        with self._locked():
            data = self._load()
            data["dids"][did] = entry
            self._dump(data)
        logger.debug("Saved operation keys for %s", did)

    def get(self, did: str) -> Optional[Dict[str, Any]]:
        return self.read()["dids"].get(did)

    def list_dids(self) -> List[str]:
        return list(self.read()["dids"])

    def delete(self, did: str) -> bool:
        """Remove a DID; returns whether it was present."""
        with self._locked():
            data = self._load()
            if data["dids"].pop(did, None) is None:
                return False
            self._dump(data)
        return True
