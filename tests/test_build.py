import pytest

from portfolio import build
from portfolio.build import RUNTIME_JS, build_js, build_site
from portfolio.config import ConfigError
from portfolio.sanitize import parse_markup
from portfolio.verify_links import audit_site


def test_build_writes_page_assets_and_runtime(site_source, tmp_path):
    site_dir = tmp_path / "site"
    output = build_site(site_source, site_source / "index.html", site_dir)

    assert output == site_dir / "index.html"
    document = parse_markup(output.read_text(encoding="utf-8"))
    assert document.find(id="hero-name").get_text() == "Dr. Ada Lovelace"
    assert len(document.find_all("script", src=RUNTIME_JS.as_posix())) == 1
    assert (site_dir / RUNTIME_JS).read_text(encoding="utf-8") == build_js()
    assert (site_dir / "css" / "style.css").exists()
    assert (site_dir / "images" / "ada.jpg").exists()
    assert not (site_dir / "config").exists()


def test_rendered_page_passes_link_audit(site_source, tmp_path):
    site_dir = tmp_path / "site"
    build_site(site_source, site_source / "index.html", site_dir)
    assert audit_site(site_dir) == []


def test_build_replaces_previous_output(site_source, tmp_path):
    site_dir = tmp_path / "site"
    site_dir.mkdir()
    (site_dir / "stale.html").write_text("old", encoding="utf-8")
    build_site(site_source, site_source / "index.html", site_dir)
    assert not (site_dir / "stale.html").exists()


def test_output_inside_source_directory_is_not_copied_into_itself(site_source):
    site_dir = site_source / "site"
    build_site(site_source, site_source / "index.html", site_dir)
    build_site(site_source, site_source / "index.html", site_dir)
    assert (site_dir / "index.html").exists()
    assert not (site_dir / "site").exists()


def test_existing_runtime_script_is_not_duplicated(site_source, tmp_path):
    template = site_source / "index.html"
    markup = template.read_text(encoding="utf-8")
    template.write_text(markup.replace("</body>", '<script src="js/portfolio.js"></script></body>'), encoding="utf-8")
    output = build_site(site_source, template, tmp_path / "site")
    document = parse_markup(output.read_text(encoding="utf-8"))
    assert len(document.find_all("script")) == 1


def test_missing_config_aborts_before_touching_output(site_source, tmp_path):
    (site_source / "config" / "news.json").unlink()
    site_dir = tmp_path / "site"
    site_dir.mkdir()
    (site_dir / "keep.html").write_text("previous build", encoding="utf-8")
    with pytest.raises(ConfigError, match="Failed to load news config"):
        build_site(site_source, site_source / "index.html", site_dir)
    assert (site_dir / "keep.html").exists()


def test_missing_template(site_source, tmp_path):
    with pytest.raises(SystemExit, match="Missing template file"):
        build_site(site_source, site_source / "nope.html", tmp_path / "site")


def test_main_success(site_source, tmp_path, capsys):
    code = build.main(
        ["--config", str(site_source), "--template", str(site_source / "index.html"), "--out", str(tmp_path / "out")]
    )
    assert code == 0
    assert "[portfolio] Wrote" in capsys.readouterr().out
    assert (tmp_path / "out" / "index.html").exists()


def test_main_logs_and_stops_on_config_error(site_source, tmp_path, capsys):
    (site_source / "config" / "profile.json").write_text("{not json", encoding="utf-8")
    code = build.main(
        ["--config", str(site_source), "--template", str(site_source / "index.html"), "--out", str(tmp_path / "out")]
    )
    assert code == 1
    out = capsys.readouterr().out
    assert "[portfolio] Error initializing portfolio: Failed to load profile config" in out
    assert not (tmp_path / "out").exists()


def test_runtime_wires_browser_behaviour():
    script = build_js()
    for marker in (
        "IntersectionObserver",
        "threshold: 0.1",
        "news-visible",
        "'Show less' : 'Show more'",
        "window.scrollY > 50",
        "window.scrollY + 100",
        "behavior: 'smooth'",
        "document.body.style.overflow",
    ):
        assert marker in script


@pytest.mark.parametrize("relative_out", [".", ".."])
def test_output_directory_must_not_contain_template(site_source, relative_out):
    site_dir = site_source / relative_out
    with pytest.raises(SystemExit, match="contains the template"):
        build_site(site_source, site_source / "index.html", site_dir)
    assert (site_source / "config" / "profile.json").exists()
    assert (site_source / "css" / "style.css").exists()
    assert "hero-name\"></h1>" in (site_source / "index.html").read_text(encoding="utf-8")


def test_only_static_assets_are_published(site_source, tmp_path):
    (site_source / "favicon.ico").write_bytes(b"\x00")
    (site_source / "cv.pdf").write_bytes(b"%PDF")
    (site_source / "pyproject.toml").write_text("[project]\n", encoding="utf-8")
    (site_source / "README.md").write_text("notes", encoding="utf-8")
    for package in ("portfolio", "tests", "venv"):
        (site_source / package).mkdir()
        (site_source / package / "module.py").write_text("x = 1\n", encoding="utf-8")
    (site_source / "assets" / "fonts").mkdir(parents=True)
    (site_source / "assets" / "fonts" / "serif.woff2").write_bytes(b"wOF2")

    site_dir = tmp_path / "site"
    build_site(site_source, site_source / "index.html", site_dir)

    assert (site_dir / "favicon.ico").exists()
    assert (site_dir / "cv.pdf").exists()
    assert (site_dir / "assets" / "fonts" / "serif.woff2").exists()
    for unpublished in ("pyproject.toml", "README.md", "portfolio", "tests", "venv", "config"):
        assert not (site_dir / unpublished).exists()
