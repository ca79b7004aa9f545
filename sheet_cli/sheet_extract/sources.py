"""Published Google Sheet helpers: export URL resolution and a single download."""

from __future__ import annotations

import logging
import re
import sys
import time
from pathlib import Path

import requests

from sheet_cli.shared.exceptions import SourceFetchError

_LOGGER = logging.getLogger(__name__)

_SHEET_ID_RE = re.compile(r"/d/([a-zA-Z0-9\-_]+)")
_GID_RE = re.compile(r"[#&]gid=([0-9]+)")
_CSV_MARKERS = ("output=csv", "tqx=out:csv")

EXPORT_URL_TEMPLATE = "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq?tqx=out:csv&gid={gid}"


def to_csv_export_url(url: str | None) -> str:
    """Turn a sheet URL copied from the browser into its CSV export URL.

    URLs that already point at a CSV export, and URLs without a sheet id, are
    returned unchanged.
    """

    if not url:
        return ""
    if any(marker in url for marker in _CSV_MARKERS):
        return url
    id_match = _SHEET_ID_RE.search(url)
    if not id_match:
        return url
    gid_match = _GID_RE.search(url)
    gid = gid_match.group(1) if gid_match else "0"
    return EXPORT_URL_TEMPLATE.format(sheet_id=id_match.group(1), gid=gid)


def _with_cache_buster(url: str, now_ms: int) -> str:
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}t={now_ms}"


def fetch_sheet_csv(
    url: str,
    *,
    timeout: float = 30.0,
    cache_bust: bool = True,
    session: requests.Session | None = None,
) -> str:
    """Download the CSV export for ``url`` once and return its text.

    Retrying and polling are left to the caller; every successful call is a
    complete snapshot of the sheet.
    """

    export_url = to_csv_export_url(url)
    if not export_url:
        raise SourceFetchError("No sheet URL configured. Pass --url or set sheet.url in config.")
    if cache_bust:
        export_url = _with_cache_buster(export_url, int(time.time() * 1000))

    _LOGGER.debug("Fetching sheet CSV from %s", export_url)
    getter = session.get if session is not None else requests.get
    try:
        response = getter(export_url, timeout=timeout)
    except requests.RequestException as exc:
        raise SourceFetchError(f"Could not access sheet ({exc}).") from exc
    if not response.ok:
        raise SourceFetchError(f"Could not access sheet ({response.status_code}).")
    return response.text


def read_sheet_text(
    source: str | None,
    *,
    url: str | None,
    timeout: float = 30.0,
    cache_bust: bool = True,
) -> str:
    """Return CSV text from a local file, ``-`` for stdin, or the sheet URL.

    A local ``source`` takes precedence over ``url``.
    """

    if source == "-":
        return sys.stdin.read()
    if source:
        path = Path(source).expanduser()
        if not path.exists():
            raise SourceFetchError(f"CSV file not found: {path}")
        return path.read_text(encoding="utf-8-sig")
    if not url:
        raise SourceFetchError(
            "No input given. Pass a CSV path, '-' for stdin, --url, or set sheet.url in config."
        )
    return fetch_sheet_csv(url, timeout=timeout, cache_bust=cache_bust)
