from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

from portfolio.config import Portfolio
from portfolio.sanitize import parse_markup

TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Portfolio</title>
  <link rel="stylesheet" href="css/style.css">
</head>
<body>
  <nav id="navbar">
    <button id="nav-toggle">Menu</button>
    <ul id="nav-menu">
      <li><a class="nav-link" href="#about">About</a></li>
      <li><a class="nav-link" href="#news">News</a></li>
      <li><a class="nav-link" href="#publications">Publications</a></li>
      <li><a class="nav-link" href="#contact">Contact</a></li>
    </ul>
  </nav>
  <section id="hero">
    <h1 id="hero-name"></h1>
    <p id="hero-position"></p>
    <p id="hero-tagline"></p>
    <div id="profile-image"></div>
    <div id="hero-social-links"></div>
  </section>
  <section id="about">
    <div id="about-text"></div>
    <div class="stat-item">12 papers</div>
  </section>
  <section id="news">
    <ul id="news-list"></ul>
    <button id="news-expand-btn" style="display: none">Show more</button>
  </section>
  <section id="publications">
    <div id="publications-grid"></div>
    <div id="publications-cta"></div>
  </section>
  <section id="contact">
    <div id="contact-info"></div>
    <div id="social-links"></div>
  </section>
  <footer>
    <span id="current-year"></span>
    <span id="footer-name"></span>
    <span id="footer-note"></span>
  </footer>
</body>
</html>
"""

PROFILE = {
    "title": "Dr.",
    "name": "Ada",
    "surname": "Lovelace",
    "position": "Research Scientist",
    "tagline": "Analytical engines & poetical science",
    "profile_image": "images/ada.jpg",
    "social": {
        "orcid": "https://orcid.org/0000-0000-0000-0000",
        "github": "https://github.com/ada",
        "google_scholar": "https://scholar.google.com/citations?user=ada",
        "linkedin": "https://www.linkedin.com/in/ada",
        "mastodon": "https://example.social/@ada",
    },
    "about": {
        "lead": "I build <strong>engines</strong><script>alert(1)</script>",
        "paragraphs": [
            "First <em>paragraph</em>.",
            '<a href="javascript:alert(1)">bad link</a>',
        ],
    },
    "contact": {
        "email": "ada@example.org",
        "location": {"department": "Department of Mathematics", "institution": "University of London"},
    },
    "footer": {"copyright_name": "Ada Lovelace", "note": "Built with care"},
}

NEWS = {
    "news": [
        {"date": "Jun 2025", "text": 'Paper accepted at <a href="https://conf.example">ICML</a>'},
        {"date": "May 2025", "text": "Gave a <b>keynote</b>"},
        {"date": "Apr 2025", "text": "Joined the lab"},
        {"date": "Mar 2025", "text": "New preprint"},
        {"date": "Feb 2025", "text": "Workshop talk"},
        {"date": "Jan 2025", "text": "<div onclick=\"x()\">Started PhD</div>"},
    ]
}

PUBLICATIONS = {
    "publications": [
        {
            "title": "Engines & Notes",
            "venue": "NeurIPS",
            "year": 2024,
            "authors": "<b>A. Lovelace</b>, C. Babbage",
            "description": "Notes on the engine.<img src=x onerror=alert(1)>",
            "image": "images/pub1.png",
            "links": {"paper": "https://arxiv.org/abs/1", "code": "https://github.com/ada/engine"},
        },
        {
            "title": "Poetical Science",
            "venue": "Workshop",
            "authors": "A. Lovelace",
            "description": "",
            "links": {"page": "https://example.org/poetical"},
        },
    ]
}


@pytest.fixture
def profile() -> dict:
    return copy.deepcopy(PROFILE)


@pytest.fixture
def news() -> dict:
    return copy.deepcopy(NEWS)


@pytest.fixture
def publications() -> dict:
    return copy.deepcopy(PUBLICATIONS)


@pytest.fixture
def portfolio(profile, news, publications) -> Portfolio:
    return Portfolio(profile=profile, publications=publications, news=news)


@pytest.fixture
def document():
    return parse_markup(TEMPLATE)


def _write_json(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def site_source(tmp_path, profile, news, publications) -> Path:
    source = tmp_path / "src"
    source.mkdir()
    (source / "index.html").write_text(TEMPLATE, encoding="utf-8")
    _write_json(source / "config" / "profile.json", profile)
    _write_json(source / "config" / "news.json", news)
    _write_json(source / "config" / "publications.json", publications)
    (source / "css").mkdir()
    (source / "css" / "style.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (source / "images").mkdir()
    (source / "images" / "ada.jpg").write_bytes(b"\xff\xd8\xff")
    (source / "images" / "pub1.png").write_bytes(b"\x89PNG")
    return source
