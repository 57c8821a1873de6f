from __future__ import annotations

import logging
import os
from pathlib import Path
import re
import time
from uuid import uuid4

logger = logging.getLogger(__name__)

ARTIFACT_PREFIX = "contract"
_ARTIFACT_NAME = re.compile(r"contract_[0-9]+(_[0-9a-f]+)?\.pdf")


class ArtifactNotFoundError(LookupError):
    pass


class ArtifactStore:
    """Flat directory of generated contract files. Nothing is ever deleted."""

    def __init__(self, root: str | Path, download_route: str = "/api/download") -> None:
        self.root = Path(root)
        self.download_route = download_route.rstrip("/")

    def new_name(self) -> str:
        timestamp = int(time.time() * 1000)
        return f"{ARTIFACT_PREFIX}_{timestamp}_{uuid4().hex[:8]}"

    def write_text(self, file_name: str, text: str) -> Path:
        path = self._ensure_root() / file_name
        path.write_text(text, encoding="utf-8")
        return path

    def write_bytes(self, file_name: str, data: bytes) -> Path:
        path = self._ensure_root() / file_name
        staging = path.with_name(f".{path.name}.partial")
        try:
            staging.write_bytes(data)
            os.replace(staging, path)
        finally:
            if staging.exists():
                staging.unlink()
        logger.info("stored artifact %s (%d bytes)", path.name, len(data))
        return path

    def reference_for(self, file_name: str) -> str:
        return f"{self.download_route}?file={file_name}"

    def read(self, file_name: str) -> bytes:
        if not _ARTIFACT_NAME.fullmatch(file_name or ""):
            logger.warning("rejected artifact lookup for %r", file_name)
            raise ArtifactNotFoundError(f"Unknown artifact: {file_name}")
        path = self.root / file_name
        if not path.is_file():
            logger.warning("artifact %s not found under %s", file_name, self.root)
            raise ArtifactNotFoundError(f"Unknown artifact: {file_name}")
        return path.read_bytes()

    def _ensure_root(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root
