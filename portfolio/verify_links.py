from __future__ import annotations

import argparse
import urllib.parse
from pathlib import Path

from .build import PREFIX
from .config import SITE_DIR
from .sanitize import parse_markup


def _is_script_link(url: str) -> bool:
    return url.strip().lower().startswith("javascript:")


def _is_internal_link(url: str) -> bool:
    """Checks if the URL points at a file inside the site."""
    if url.startswith(("http://", "https://", "mailto:", "#", "tel:")):
        return False
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme:
        return False
    return True


def _check_target_exists(site_dir: Path, source_file: Path, url: str) -> bool:
    """
    Checks if the target file exists.
    Handles relative paths and absolute paths (relative to site root).
    Ignores query parameters and fragments.
    """
    url_clean = urllib.parse.unquote(url.split("?")[0].split("#")[0])
    if not url_clean:
        return True

    if url_clean.startswith("/"):
        target_path = site_dir / url_clean.lstrip("/")
    else:
        target_path = source_file.parent / url_clean

    if target_path.is_dir():
        return (target_path / "index.html").exists()
    return target_path.exists()


def _missing_rel(rel: str) -> bool:
    return "noopener" not in rel.lower().split()


def audit_page(site_dir: Path, path: Path) -> list[tuple[str, str]]:
    """Return (url, problem) pairs for every unsafe or broken link on one page."""
    document = parse_markup(path.read_text(encoding="utf-8", errors="ignore"))
    ids = {tag["id"] for tag in document.find_all(id=True)}
    findings: list[tuple[str, str]] = []

    for anchor in document.find_all("a"):
        url = (anchor.get("href") or "").strip()
        if _is_script_link(url):
            findings.append((url, "script link"))
            continue
        if anchor.get("target") == "_blank" and _missing_rel(anchor.get("rel") or ""):
            findings.append((url, "new-tab link without rel=noopener"))
        if url.startswith("#") and len(url) > 1 and urllib.parse.unquote(url[1:]) not in ids:
            findings.append((url, "missing fragment target"))

    for tag in document.find_all(["a", "img", "script", "link"]):
        url = (tag.get("href") or tag.get("src") or "").strip()
        if url and not _is_script_link(url) and _is_internal_link(url):
            if not _check_target_exists(site_dir, path, url):
                findings.append((url, "broken internal link"))
    return findings


def audit_site(site_dir: Path) -> list[tuple[Path, str, str]]:
    findings: list[tuple[Path, str, str]] = []
    for path in sorted(site_dir.rglob("*.html")):
        for url, problem in audit_page(site_dir, path):
            findings.append((path, url, problem))
    return findings


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Audit links in the rendered portfolio.")
    parser.add_argument("site_dir", nargs="?", type=Path, default=SITE_DIR)
    args = parser.parse_args(argv)

    if not args.site_dir.exists():
        print(f"{PREFIX} {args.site_dir} not found. Run portfolio-build first.")
        return 1

    findings = audit_site(args.site_dir)
    if not findings:
        print(f"{PREFIX} Link verification passed. No unsafe or broken links found.")
        return 0

    print(f"{PREFIX} Link problems found:")
    for path, url, problem in findings:
        rel = path.relative_to(args.site_dir)
        print(f"  {rel}: {url or '(no href)'} ({problem})")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
