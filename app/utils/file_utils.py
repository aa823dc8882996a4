import posixpath
import re
import threading
import time
from pathlib import Path
from typing import List, Optional

_NON_PATH_CHARS = re.compile(r"[^a-z0-9/]+")
_NON_ALNUM_CHARS = re.compile(r"[^a-zA-Z0-9]+")


def normalize_path(raw_path: Optional[str]) -> str:
    """
    Turn a caller-supplied logical subdirectory into a safe relative path.

    The string is lower-cased and every run of characters other than ASCII
    letters, digits and "/" collapses to a single "/". Dots never survive, so
    no ".." segment can be produced. An empty or separator-only result means
    the upload root itself.
    """
    if not raw_path:
        return ""
    return _NON_PATH_CHARS.sub("/", raw_path.lower())


def path_segments(normalized_path: str) -> List[str]:
    """
    Split a normalized path into its non-empty segments.
    """
    return [segment for segment in normalized_path.split("/") if segment]


def derive_filename(original_name: Optional[str], now_ms: Optional[int] = None) -> str:
    """
    Build the stored name "{epochMillis}-{base}{extension}" for an uploaded file.

    The base has each run of non-alphanumerics replaced by "-" and is
    lower-cased. The extension (from the last "." inclusive) is kept verbatim.
    """
    name = posixpath.basename((original_name or "").replace("\\", "/"))
    base, extension = posixpath.splitext(name)
    sanitized_base = _NON_ALNUM_CHARS.sub("-", base).lower()
    if now_ms is None:
        now_ms = millisecond_clock.next()
    return f"{now_ms}-{sanitized_base}{extension}"


def resolve_within_root(root: Path, relative_path: str, allow_root: bool = False) -> Optional[Path]:
    """
    Join relative_path onto root and return the resolved path if it stays inside root.

    Leading separators are stripped so an absolute-looking input is still
    treated as relative to root. Returns None when the result escapes root,
    or equals root and allow_root is False. Raises ValueError for paths the
    OS cannot represent, such as ones with an embedded NUL byte.
    """
    resolved_root = Path(root).resolve()
    candidate = (resolved_root / relative_path.lstrip("/\\")).resolve()
    if candidate == resolved_root:
        return candidate if allow_root else None
    if resolved_root not in candidate.parents:
        return None
    return candidate


class MillisecondClock:
    """
    Epoch-millisecond clock that never returns the same value twice.

    When two calls land in the same millisecond the second one is bumped
    forward, so stored names derived from it stay unique within the process.
    """

    def __init__(self):
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            now = time.time_ns() // 1_000_000
            if now <= self._last:
                now = self._last + 1
            self._last = now
            return now


millisecond_clock = MillisecondClock()
