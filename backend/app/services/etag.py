"""Entity tags for cached payloads.

Same shape as the ``etag`` npm package the web frontend was built against:
``"<hex length>-<first 27 chars of base64 sha1>"``.
"""

import base64
import hashlib


def make_etag(payload: bytes | str) -> str:
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    digest = base64.b64encode(hashlib.sha1(payload).digest()).decode("ascii")[:27]
    return f'"{len(payload):x}-{digest}"'


def etag_matches(header: str | None, etag: str | None) -> bool:
    """Evaluate an ``If-None-Match`` header against *etag*.

    Accepts a comma-separated list and weak (``W/``) validators.
    """
    if not header or not etag:
        return False
    candidates = [c.strip() for c in header.split(",")]
    if "*" in candidates:
        return True
    bare = etag[2:] if etag.startswith("W/") else etag
    for candidate in candidates:
        if candidate.startswith("W/"):
            candidate = candidate[2:]
        if candidate == bare:
            return True
    return False
