# ============================================================================
# MULTIPART UPLOADS
# ============================================================================
# EPOCH: 1 - SPATIAL ASSET GRAPH
# STATUS: Core - Temporary upload files
# PURPOSE: Spool multipart uploads to the tmp directory for the services
# CREATED: 12 OCT 2026
# ============================================================================
"""
Multipart uploads.

Uploaded files are written to `{tmp_dir}/{timestamp}{ext}`; the service that
consumes the file deletes it. Images of a type other than jpeg/png are
treated as absent, so the caller reports MissingParameter.
"""

import asyncio
import os
import shutil
import time
from pathlib import Path
from typing import Optional, Sequence

from fastapi import UploadFile

from core.config import get_defaults


def _write(upload: UploadFile, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    upload.file.seek(0)
    with open(target, "wb") as out:
        shutil.copyfileobj(upload.file, out)


async def save_upload(
    upload: Optional[UploadFile],
    allowed_types: Optional[Sequence[str]] = None,
) -> Optional[str]:
    """Write an upload to the tmp dir; None if absent or of a rejected type."""
    if upload is None or not upload.filename:
        return None
    if allowed_types and upload.content_type not in allowed_types:
        return None

    ext = os.path.splitext(upload.filename)[1].lower()
    target = Path(get_defaults().tiles.tmp_dir) / f"{time.time_ns()}{ext}"
    await asyncio.to_thread(_write, upload, target)
    return str(target)


async def save_image(upload: Optional[UploadFile]) -> Optional[str]:
    return await save_upload(upload, get_defaults().api.image_content_types)


__all__ = ["save_upload", "save_image"]
