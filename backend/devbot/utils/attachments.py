"""Reading local files into base64 attachments."""

from __future__ import annotations

import asyncio
import base64
import mimetypes
from pathlib import Path
from typing import Sequence

from devbot.models.messages import Attachment

DEFAULT_MEDIA_TYPE = "application/octet-stream"


def guess_media_type(path: Path) -> str:
    media_type, _ = mimetypes.guess_type(path.name)
    return media_type or DEFAULT_MEDIA_TYPE


def read_attachment(path: Path) -> Attachment:
    """Read ``path`` and return it as an ``Attachment``.

    Raises:
        OSError: If the file cannot be read (missing, a directory, no
            permission).
    """
    data = base64.b64encode(path.read_bytes()).decode("ascii")
    return Attachment(name=path.name, type=guess_media_type(path), data=data)


async def load_attachments(paths: Sequence[Path | str]) -> list[Attachment]:
    """Encode several files concurrently, preserving input order."""
    return list(
        await asyncio.gather(
            *(asyncio.to_thread(read_attachment, Path(p)) for p in paths)
        )
    )
