"""
Collected snapshot store.

Serves the payloads a collector captured, by logical key
(e.g. "cluster-resources/nodes.json"). A protected map, when given, shadows
the regular collected data key by key.
"""

import logging
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

from kpreflight.core.errors import FetchError

logger = logging.getLogger(__name__)


class CollectedData:
    """Read-only view over collected payloads."""

    def __init__(
        self,
        files: Optional[Mapping[str, bytes]] = None,
        protected: Optional[Mapping[str, bytes]] = None,
    ):
        self._files: Dict[str, bytes] = dict(files or {})
        self._protected: Dict[str, bytes] = dict(protected or {})

    def fetch_blob(self, key: str) -> bytes:
        """
        Return the payload collected under key.

        Raises:
            FetchError: If nothing was collected under key.
        """
        if key in self._protected:
            return self._protected[key]
        if key in self._files:
            return self._files[key]
        raise FetchError(f"file {key} was not collected")

    def keys(self):
        return sorted(set(self._files) | set(self._protected))

    def __contains__(self, key: str) -> bool:
        return key in self._protected or key in self._files

    def __len__(self) -> int:
        return len(self.keys())

    @classmethod
    def from_directory(
        cls,
        root: Union[str, Path],
        protected: Optional[Mapping[str, bytes]] = None,
    ) -> "CollectedData":
        """
        Load every file under an extracted bundle directory.

        Keys are POSIX paths relative to root, so
        <root>/cluster-resources/nodes.json is served as
        "cluster-resources/nodes.json".

        Raises:
            FetchError: If root is not a directory.
        """
        root = Path(root)
        if not root.is_dir():
            raise FetchError(f"bundle directory {root} does not exist")

        files: Dict[str, bytes] = {}
        for path in sorted(root.rglob("*")):
            if path.is_file():
                files[path.relative_to(root).as_posix()] = path.read_bytes()

        logger.debug(f"Loaded {len(files)} collected files from {root}")
        return cls(files, protected=protected)
