from __future__ import annotations

import json
import urllib.request
from pathlib import Path
from typing import Any, NamedTuple
from urllib.parse import unquote, urljoin, urlparse

# Robust Path Detection
if (Path.cwd() / "config").exists():
    BASE_DIR = Path.cwd()
elif (Path.cwd().parent / "config").exists():
    BASE_DIR = Path.cwd().parent
else:
    BASE_DIR = Path.cwd()

CONFIG_DIR = BASE_DIR / "config"
TEMPLATE_PATH = BASE_DIR / "index.html"
SITE_DIR = BASE_DIR / "site"

CONFIG_PATHS = {
    "profile": "config/profile.json",
    "publications": "config/publications.json",
    "news": "config/news.json",
}

MAX_BYTES = 1_000_000
TIMEOUT = 10
USER_AGENT = "Portfolio Builder/1.0"


class ConfigError(Exception):
    """A configuration document could not be fetched or decoded."""


class Portfolio(NamedTuple):
    profile: dict[str, Any]
    publications: dict[str, Any]
    news: dict[str, Any]


def _is_url(location: str) -> bool:
    # Single-letter schemes are Windows drive letters.
    return len(urlparse(location).scheme) > 1


def resolve_location(base: str | Path, relative: str) -> str:
    base = str(base)
    if _is_url(base):
        return urljoin(base.rstrip("/") + "/", relative)
    return str(Path(base) / relative)


def _validate_data(data: bytes) -> bytes:
    if len(data) > MAX_BYTES:
        raise ValueError(f"resource larger than {MAX_BYTES} bytes")
    return data


def fetch_resource(location: str | Path) -> bytes:
    location = str(location)
    parsed = urlparse(location)
    if not _is_url(location) or parsed.scheme == "file":
        path = Path(unquote(parsed.path)) if parsed.scheme == "file" else Path(location)
        if not path.exists():
            raise FileNotFoundError(f"not found: {path}")
        return _validate_data(path.read_bytes())
    if parsed.scheme not in {"http", "https"}:
        raise ValueError(f"unsupported scheme: {parsed.scheme}")
    req = urllib.request.Request(location, headers={"User-Agent": USER_AGENT})
    with urllib.request.urlopen(req, timeout=TIMEOUT) as resp:
        data = resp.read(MAX_BYTES + 1)
    return _validate_data(data)


def _load_document(name: str, base: str | Path) -> dict[str, Any]:
    location = resolve_location(base, CONFIG_PATHS[name])
    try:
        document = json.loads(fetch_resource(location).decode("utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Failed to load {name} config: {exc}") from exc
    if not isinstance(document, dict):
        raise ConfigError(f"Failed to load {name} config: expected a JSON object")
    return document


def load_configurations(base: str | Path = BASE_DIR) -> Portfolio:
    """Fetch the profile, publications and news documents below *base*.

    *base* is a directory or an http(s) URL. The first document that cannot be
    fetched or decoded aborts the load with a ConfigError.
    """
    return Portfolio(
        profile=_load_document("profile", base),
        publications=_load_document("publications", base),
        news=_load_document("news", base),
    )
