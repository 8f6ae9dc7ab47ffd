"""Transfer identities.

Probes prefer a stable identity (object id plus action). Probes without one
build a signature from the normalized path, the account and a coarse time
bucket, so two sightings of the same download a few seconds apart collapse,
while the same file downloaded again much later counts again.
"""

import hashlib
import posixpath
from datetime import datetime
from typing import Optional
from urllib.parse import unquote, urlsplit

from transferquota.core.datetime_utils import utc_now

DEFAULT_BUCKET_SECONDS = 60


def node_identity(file_id: str, action: str, *qualifiers: str) -> str:
    """Identity of an action on a known object, e.g. ``node:42:read``."""
    parts = ["node", str(file_id), action, *[str(q) for q in qualifiers if q]]
    return ":".join(parts)


def normalize_path(path_or_uri: str) -> str:
    """Normalize a path or URI so equivalent spellings compare equal.

    Drops scheme, host, query and fragment, percent-decodes, collapses
    duplicate slashes and ``.``/``..`` segments, and strips a trailing slash.
    Case is preserved.
    """
    path = urlsplit(path_or_uri).path if "://" in path_or_uri else path_or_uri.split("?", 1)[0]
    path = unquote(path.split("#", 1)[0])
    return posixpath.normpath("/" + path.lstrip("/"))


def time_bucket(
    moment: Optional[datetime] = None, bucket_seconds: int = DEFAULT_BUCKET_SECONDS
) -> int:
    """Index of the coarse time bucket ``moment`` falls in."""
    moment = moment or utc_now()
    return int(moment.timestamp()) // bucket_seconds


def signature_identity(
    account_id: str,
    path: str,
    *extra: str,
    moment: Optional[datetime] = None,
    bucket_seconds: int = DEFAULT_BUCKET_SECONDS,
) -> str:
    """Best-effort identity for transfers without a stable object id.

    Args:
        account_id: Account the transfer is billed to
        path: Path or URI of the transferred resource
        extra: Further distinguishing values (e.g. a user agent)
        moment: When the transfer was observed; defaults to now
        bucket_seconds: Width of the time bucket

    Returns:
        ``sig:<sha256 prefix>``
    """
    material = "|".join(
        [
            account_id,
            normalize_path(path),
            str(time_bucket(moment, bucket_seconds)),
            *[str(e) for e in extra if e],
        ]
    )
    return "sig:" + hashlib.sha256(material.encode("utf-8")).hexdigest()[:32]
