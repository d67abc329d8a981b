# repository/namespaces.py
from typing import Final

ROOT: Final[str] = "greenclaim"

DOCUMENTS: Final[str] = f"{ROOT}:documents"  # hash per source tag
CHUNKS: Final[str] = f"{ROOT}:chunks"  # hash per chunk id
SOURCES: Final[str] = f"{ROOT}:sources"  # per-tag chunk order + term index
DETECTIONS: Final[str] = f"{ROOT}:detections"  # append-only audit list
