from __future__ import annotations

import argparse
import shutil
from pathlib import Path

from .config import BASE_DIR, SITE_DIR, TEMPLATE_PATH, ConfigError, load_configurations
from .render import render_page
from .sanitize import parse_markup, serialize_markup

PREFIX = "[portfolio]"
RUNTIME_JS = Path("js") / "portfolio.js"

# Only these directories and top-level file types beside the template are published.
ASSET_DIRS = ("assets", "css", "js", "images", "img", "media", "fonts", "files")
ASSET_SUFFIXES = {
    ".css", ".js", ".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".ico",
    ".pdf", ".woff", ".woff2",
}


def build_js() -> str:
    return """
const navbar = document.getElementById('navbar');
const navToggle = document.getElementById('nav-toggle');
const navMenu = document.getElementById('nav-menu');
const navLinks = document.querySelectorAll('.nav-link');
let newsExpanded = false;

function closeMobileMenu() {
  if (!navToggle || !navMenu) return;
  navToggle.classList.remove('active');
  navMenu.classList.remove('active');
  document.body.style.overflow = '';
}

function toggleMobileMenu() {
  navToggle.classList.toggle('active');
  navMenu.classList.toggle('active');
  document.body.style.overflow = navMenu.classList.contains('active') ? 'hidden' : '';
}

function setActiveLink(activeLink) {
  navLinks.forEach((link) => link.classList.remove('active'));
  activeLink.classList.add('active');
}

function updateActiveLinkOnScroll() {
  const scrollPosition = window.scrollY + 100;
  document.querySelectorAll('section[id]').forEach((section) => {
    const top = section.offsetTop;
    if (scrollPosition >= top && scrollPosition < top + section.offsetHeight) {
      const hash = `#${section.getAttribute('id')}`;
      navLinks.forEach((link) => {
        link.classList.toggle('active', link.getAttribute('href') === hash);
      });
    }
  });
}

function handleNavbarScroll() {
  if (!navbar) return;
  navbar.classList.toggle('scrolled', window.scrollY > 50);
}

function initNavigation() {
  if (navToggle && navMenu) {
    navToggle.addEventListener('click', toggleMobileMenu);
  }
  navLinks.forEach((link) => {
    link.addEventListener('click', () => {
      closeMobileMenu();
      setActiveLink(link);
    });
  });
  window.addEventListener('scroll', handleNavbarScroll, { passive: true });
  window.addEventListener('scroll', updateActiveLinkOnScroll, { passive: true });
}

function initScrollAnimations() {
  const observer = new IntersectionObserver((entries) => {
    entries.forEach((entry) => {
      if (entry.isIntersecting) {
        entry.target.classList.add('visible');
      }
    });
  }, { root: null, rootMargin: '0px', threshold: 0.1 });
  document.querySelectorAll('.fade-in').forEach((el) => observer.observe(el));
}

function initNewsToggle() {
  const expandBtn = document.getElementById('news-expand-btn');
  if (!expandBtn) return;
  expandBtn.addEventListener('click', () => {
    newsExpanded = !newsExpanded;
    document.querySelectorAll('.news-item.news-hidden').forEach((item) => {
      item.classList.toggle('news-visible', newsExpanded);
    });
    expandBtn.textContent = newsExpanded ? 'Show less' : 'Show more';
  });
}

function smoothScroll() {
  document.querySelectorAll('a[href^="#"]').forEach((anchor) => {
    anchor.addEventListener('click', (event) => {
      const targetId = anchor.getAttribute('href');
      if (!targetId || targetId.length < 2) return;
      const target = document.querySelector(targetId);
      event.preventDefault();
      if (!target) return;
      const navbarHeight = navbar ? navbar.offsetHeight : 0;
      window.scrollTo({ top: target.offsetTop - navbarHeight, behavior: 'smooth' });
    });
  });
}

document.addEventListener('DOMContentLoaded', () => {
  try {
    initScrollAnimations();
    initNavigation();
    initNewsToggle();
    smoothScroll();
  } catch (error) {
    console.error('Error initializing portfolio:', error);
  }
});
"""


def _static_files(source_dir: Path) -> list[Path]:
    files = [
        path for path in sorted(source_dir.iterdir())
        if path.is_file() and path.suffix.lower() in ASSET_SUFFIXES
    ]
    for name in ASSET_DIRS:
        asset_dir = source_dir / name
        if asset_dir.is_dir():
            files.extend(path for path in sorted(asset_dir.rglob("*")) if path.is_file())
    return files


def _copy_static_files(template_path: Path, site_dir: Path) -> None:
    source_dir = template_path.parent
    site_dir = site_dir.resolve()
    for path in _static_files(source_dir):
        if path.resolve().is_relative_to(site_dir):
            continue
        target = site_dir / path.relative_to(source_dir)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(path, target)


def _ensure_runtime_script(document, src: str) -> None:
    if document.find("script", src=src) is not None:
        return
    script = document.new_tag("script", attrs={"src": src})
    (document.body or document).append(script)


def build_site(config_base: str | Path = BASE_DIR, template_path: Path = TEMPLATE_PATH, site_dir: Path = SITE_DIR) -> Path:
    """Render the portfolio page into *site_dir* and return the written index path."""
    template_path = Path(template_path).resolve()
    site_dir = Path(site_dir)
    if not template_path.exists():
        raise SystemExit(f"Missing template file: {template_path}")
    if template_path.parent.is_relative_to(site_dir.resolve()):
        raise SystemExit(f"Output directory {site_dir} contains the template; choose a separate --out")

    portfolio = load_configurations(config_base)
    document = parse_markup(template_path.read_text(encoding="utf-8"))
    render_page(document, portfolio)
    _ensure_runtime_script(document, RUNTIME_JS.as_posix())

    if site_dir.exists():
        shutil.rmtree(site_dir)
    site_dir.mkdir(parents=True, exist_ok=True)
    _copy_static_files(template_path, site_dir)
    runtime_path = site_dir / RUNTIME_JS
    runtime_path.parent.mkdir(parents=True, exist_ok=True)
    runtime_path.write_text(build_js(), encoding="utf-8")

    output_path = site_dir / "index.html"
    output_path.write_text(serialize_markup(document), encoding="utf-8")
    return output_path


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Render the academic portfolio page from its JSON config.")
    parser.add_argument("--config", default=str(BASE_DIR), help="Directory or URL that holds config/*.json.")
    parser.add_argument("--template", type=Path, default=TEMPLATE_PATH, help="HTML template to populate.")
    parser.add_argument("--out", type=Path, default=SITE_DIR, help="Output directory (replaced on every build).")
    args = parser.parse_args(argv)

    try:
        output_path = build_site(args.config, args.template, args.out)
    except ConfigError as exc:
        print(f"{PREFIX} Error initializing portfolio: {exc}")
        return 1
    print(f"{PREFIX} Wrote {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
