"""
Output filename resolution.
"""

import os
import time
from typing import Callable, Optional

DEFAULT_EXTENSION = "webp"


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def resolve_filename(
    custom_name: Optional[str] = None,
    extension: str = DEFAULT_EXTENSION,
    clock: Callable[[], int] = _epoch_millis,
) -> str:
    """
    Derive the output filename for a capture.

    A supplied name that already has an extension is returned unchanged, one
    without gets ``.<extension>`` appended. Without a name the result is
    ``screenshot_<epoch-millis>.<extension>``. Existing files are not checked.
    """
    if custom_name:
        _, ext = os.path.splitext(custom_name)
        if not ext:
            return f"{custom_name}.{extension}"
        return custom_name

    return f"screenshot_{clock()}.{extension}"
