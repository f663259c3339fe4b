"""Photo storage collaborator.

Records only keep an opaque ``photo_ref`` of the form ``<kind>/<file>``;
releasing the underlying file is this module's job, never the repositories'.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePath, PurePosixPath

logger = logging.getLogger(__name__)


def public_url(kind: str, ref: str | None) -> str | None:
    """Return the public URL under which an uploaded photo is served."""

    if not ref:
        return None
    return f"/uploads/{kind}/{PurePath(ref).name}"


def checked_ref(kind: str, ref: str | None) -> str | None:
    """
    Normalise a photo reference and confine it to ``kind``'s directory.

    Raises ValueError for anything that is not exactly ``<kind>/<file>``.
    """
    if not ref:
        return None
    path = PurePosixPath(ref)
    if path.is_absolute() or len(path.parts) != 2 or path.parts[0] != kind or path.name in ("", ".", ".."):
        raise ValueError(f"Photo reference must look like {kind}/<file>")
    return str(path)


class PhotoStore(ABC):
    """Interface for releasing stored photos by reference."""

    @abstractmethod
    def release(self, ref: str | None) -> bool:
        """Remove the stored photo; return whether a file was deleted."""


class LocalPhotoStore(PhotoStore):
    """Photos kept on the local disk under ``root``."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).resolve()

    def release(self, ref: str | None) -> bool:
        """Delete the referenced file; refs outside ``root`` are left alone."""

        if not ref:
            return False
        path = Path(ref)
        if not path.is_absolute():
            path = self.root / path
        path = path.resolve()
        if not path.is_relative_to(self.root):
            logger.warning("refusing to release photo outside upload dir: %s", ref)
            return False
        if not path.is_file():
            return False
        path.unlink()
        logger.info("released photo %s", path)
        return True


async def release_unused(photos: PhotoStore, repo, ref: str | None) -> bool:
    """Release ``ref`` unless some record of ``repo`` still points at it."""

    if not ref:
        return False
    if await repo.photo_in_use(ref):
        logger.info("photo %s still referenced, keeping it", ref)
        return False
    return photos.release(ref)
