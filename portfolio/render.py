from __future__ import annotations

from datetime import datetime
from typing import Any

from bs4 import BeautifulSoup, Tag

from .config import Portfolio
from .sanitize import parse_markup, sanitize

MAX_VISIBLE_NEWS = 4
NEWS_EXPAND_DISPLAY = "inline-block"
SCHOLAR_CTA_TEXT = "View All on Google Scholar"
LINKEDIN_CTA_TEXT = "Connect with me"
STAGGER_MS = 100

EXTERNAL_TARGET = "_blank"
EXTERNAL_REL = "noopener noreferrer"

PUBLICATION_PLACEHOLDER_SVG = """<svg class="publication-image-placeholder" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="1">
  <path d="M14 2H6a2 2 0 0 0-2 2v16a2 2 0 0 0 2 2h12a2 2 0 0 0 2-2V8z"/>
  <polyline points="14 2 14 8 20 8"/>
  <line x1="16" y1="13" x2="8" y2="13"/>
  <line x1="16" y1="17" x2="8" y2="17"/>
  <polyline points="10 9 9 9 8 9"/>
</svg>"""

PUBLICATION_LINKS = [
    (
        "paper",
        "Paper",
        '<svg width="16" height="16" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2"><path d="M14 2H6a2 2 0 0 0-2 2v16a2 2 0 0 0 2 2h12a2 2 0 0 0 2-2V8z"/><polyline points="14 2 14 8 20 8"/></svg>',
    ),
    (
        "code",
        "Code",
        '<svg width="16" height="16" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2"><polyline points="16 18 22 12 16 6"/><polyline points="8 6 2 12 8 18"/></svg>',
    ),
    (
        "page",
        "Page",
        '<svg width="16" height="16" viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2"><circle cx="12" cy="12" r="10"/><line x1="2" y1="12" x2="22" y2="12"/><path d="M12 2a15.3 15.3 0 0 1 4 10 15.3 15.3 0 0 1-4 10 15.3 15.3 0 0 1-4-10 15.3 15.3 0 0 1 4-10z"/></svg>',
    ),
]

SOCIAL_ICONS = {
    "github": '<svg viewBox="0 0 24 24" fill="currentColor"><path d="M12 0c-6.626 0-12 5.373-12 12 0 5.302 3.438 9.8 8.207 11.387.599.111.793-.261.793-.577v-2.234c-3.338.726-4.033-1.416-4.033-1.416-.546-1.387-1.333-1.756-1.333-1.756-1.089-.745.083-.729.083-.729 1.205.084 1.839 1.237 1.839 1.237 1.07 1.834 2.807 1.304 3.492.997.107-.775.418-1.305.762-1.604-2.665-.305-5.467-1.334-5.467-5.931 0-1.311.469-2.381 1.236-3.221-.124-.303-.535-1.524.117-3.176 0 0 1.008-.322 3.301 1.23.957-.266 1.983-.399 3.003-.404 1.02.005 2.047.138 3.006.404 2.291-1.552 3.297-1.23 3.297-1.23.653 1.653.242 2.874.118 3.176.77.84 1.235 1.911 1.235 3.221 0 4.609-2.807 5.624-5.479 5.921.43.372.823 1.102.823 2.222v3.293c0 .319.192.694.801.576 4.765-1.589 8.199-6.086 8.199-11.386 0-6.627-5.373-12-12-12z"/></svg>',
    "cv": '<span class="cv-text-icon">CV</span>',
    "google_scholar": '<svg viewBox="0 0 24 24" fill="currentColor"><path d="M5.242 13.769L0 9.5 12 0l12 9.5-5.242 4.269C17.548 11.249 14.978 9.5 12 9.5c-2.977 0-5.548 1.748-6.758 4.269zM12 10a7 7 0 1 0 0 14 7 7 0 0 0 0-14z"/></svg>',
    "orcid": '<svg viewBox="0 0 24 24" fill="currentColor"><path d="M12 0C5.372 0 0 5.372 0 12s5.372 12 12 12 12-5.372 12-12S18.628 0 12 0zM7.369 4.378c.525 0 .947.431.947.947s-.422.947-.947.947a.95.95 0 0 1-.947-.947c0-.525.422-.947.947-.947zm-.722 3.038h1.444v10.041H6.647V7.416zm3.562 0h3.9c3.712 0 5.344 2.653 5.344 5.025 0 2.578-2.016 5.025-5.325 5.025h-3.919V7.416zm1.444 1.303v7.444h2.297c3.272 0 4.022-2.484 4.022-3.722 0-2.016-1.284-3.722-4.097-3.722h-2.222z"/></svg>',
    "linkedin": '<svg viewBox="0 0 24 24" fill="currentColor"><path d="M20.447 20.452h-3.554v-5.569c0-1.328-.027-3.037-1.852-3.037-1.853 0-2.136 1.445-2.136 2.939v5.667H9.351V9h3.414v1.561h.046c.477-.9 1.637-1.85 3.37-1.85 3.601 0 4.267 2.37 4.267 5.455v6.286zM5.337 7.433c-1.144 0-2.063-.926-2.063-2.065 0-1.138.92-2.063 2.063-2.063 1.14 0 2.064.925 2.064 2.063 0 1.139-.925 2.065-2.064 2.065zm1.782 13.019H3.555V9h3.564v11.452zM22.225 0H1.771C.792 0 0 .774 0 1.729v20.542C0 23.227.792 24 1.771 24h20.451C23.2 24 24 23.227 24 22.271V1.729C24 .774 23.2 0 22.222 0h.003z"/></svg>',
}

SOCIAL_LABELS = {
    "github": "GitHub",
    "cv": "CV",
    "google_scholar": "Google Scholar",
    "orcid": "ORCID",
    "linkedin": "LinkedIn",
}

SOCIAL_ORDER = ["github", "linkedin", "google_scholar", "cv", "orcid"]

EMAIL_ICON = """<svg viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2">
  <path d="M4 4h16c1.1 0 2 .9 2 2v12c0 1.1-.9 2-2 2H4c-1.1 0-2-.9-2-2V6c0-1.1.9-2 2-2z"/>
  <polyline points="22,6 12,13 2,6"/>
</svg>"""

LOCATION_ICON = """<svg viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2">
  <path d="M21 10c0 7-9 13-9 13s-9-6-9-13a9 9 0 0 1 18 0z"/>
  <circle cx="12" cy="10" r="3"/>
</svg>"""

LINKEDIN_ICON = """<svg viewBox="0 0 24 24" fill="none" stroke="currentColor" stroke-width="2">
  <path d="M16 8a6 6 0 0 1 6 6v7h-4v-7a2 2 0 0 0-2-2 2 2 0 0 0-2 2v7h-4v-7a6 6 0 0 1 6-6z"/>
  <rect x="2" y="9" width="4" height="12"/>
  <circle cx="4" cy="4" r="2"/>
</svg>"""


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _join(*parts: Any) -> str:
    return " ".join(_text(part) for part in parts).strip()


def _element(document: BeautifulSoup, element_id: str) -> Tag | None:
    return document.find(id=element_id)


def _new(document: BeautifulSoup, name: str, class_name: str = "", text: str | None = None, **attrs: str) -> Tag:
    tag = document.new_tag(name, attrs=attrs)
    if class_name:
        tag["class"] = class_name
    if text is not None:
        tag.string = text
    return tag


def _add_class(tag: Tag, *names: str) -> None:
    classes = _text(tag.get("class")).split()
    for name in names:
        if name not in classes:
            classes.append(name)
    tag["class"] = " ".join(classes)


def _set_style(tag: Tag, prop: str, value: str) -> None:
    declarations: dict[str, str] = {}
    for chunk in _text(tag.get("style")).split(";"):
        if ":" in chunk:
            key, val = chunk.split(":", 1)
            declarations[key.strip()] = val.strip()
    declarations[prop] = value
    tag["style"] = "; ".join(f"{key}: {val}" for key, val in declarations.items())


def _append_markup(tag: Tag, markup: str) -> None:
    fragment = parse_markup(markup)
    for node in list(fragment.contents):
        tag.append(node.extract())


def set_html_content(element: Tag | None, markup: Any) -> None:
    """Replace the children of *element* with sanitized author markup."""
    if element is None:
        return
    element.clear()
    _append_markup(element, sanitize(markup))


def _external_link(document: BeautifulSoup, href: str, class_name: str = "") -> Tag:
    return _new(document, "a", class_name, href=href, target=EXTERNAL_TARGET, rel=EXTERNAL_REL)


def render_social_links(document: BeautifulSoup, container: Tag | None, social: dict[str, Any] | None, class_name: str) -> None:
    if container is None or not social:
        return
    for key in SOCIAL_ORDER:
        url = social.get(key)
        if not url or key not in SOCIAL_ICONS:
            continue
        link = _external_link(document, _text(url), class_name)
        link["aria-label"] = SOCIAL_LABELS.get(key, key)
        _append_markup(link, SOCIAL_ICONS[key])
        container.append(link)


def render_profile(document: BeautifulSoup, profile: dict[str, Any] | None) -> None:
    if not profile:
        return

    hero_name = _element(document, "hero-name")
    if hero_name is not None:
        hero_name.string = _join(profile.get("title"), profile.get("name"), profile.get("surname"))
    hero_position = _element(document, "hero-position")
    if hero_position is not None:
        hero_position.string = _text(profile.get("position"))
    hero_tagline = _element(document, "hero-tagline")
    if hero_tagline is not None:
        hero_tagline.string = _text(profile.get("tagline"))

    profile_image = _element(document, "profile-image")
    if profile_image is not None and profile.get("profile_image"):
        img = _new(
            document,
            "img",
            "profile-img",
            src=_text(profile["profile_image"]),
            alt=_join(profile.get("name"), profile.get("surname")),
        )
        profile_image.clear()
        profile_image.append(img)

    hero_social = _element(document, "hero-social-links")
    if hero_social is not None and profile.get("social"):
        hero_social.clear()
        render_social_links(document, hero_social, profile["social"], "hero-social-link")

    about_text = _element(document, "about-text")
    about = profile.get("about")
    if about_text is not None and about:
        about_text.clear()
        if about.get("lead"):
            lead = _new(document, "p", "about-lead")
            set_html_content(lead, about["lead"])
            about_text.append(lead)
        for paragraph in about.get("paragraphs") or []:
            p = _new(document, "p")
            set_html_content(p, paragraph)
            about_text.append(p)


def render_news(document: BeautifulSoup, news: dict[str, Any] | None) -> None:
    if not news or not news.get("news"):
        return
    news_list = _element(document, "news-list")
    if news_list is None:
        return

    news_list.clear()
    items = news["news"]
    for index, item in enumerate(items):
        li = _new(document, "li", "news-item")
        if index >= MAX_VISIBLE_NEWS:
            _add_class(li, "news-hidden")
        li.append(_new(document, "span", "news-date", text=_text(item.get("date"))))
        text_span = _new(document, "span", "news-text")
        set_html_content(text_span, item.get("text") or "")
        li.append(text_span)
        news_list.append(li)

    expand_btn = _element(document, "news-expand-btn")
    if expand_btn is not None and len(items) > MAX_VISIBLE_NEWS:
        _set_style(expand_btn, "display", NEWS_EXPAND_DISPLAY)


def _publication_links(document: BeautifulSoup, links: dict[str, Any] | None, container: Tag) -> None:
    if not links:
        return
    for key, label, icon in PUBLICATION_LINKS:
        if not links.get(key):
            continue
        link = _external_link(document, _text(links[key]), "publication-link")
        _append_markup(link, icon)
        link.append(f" {label}")
        container.append(link)


def create_publication_card(document: BeautifulSoup, publication: dict[str, Any]) -> Tag:
    article = _new(document, "article", "publication-card fade-in")

    image_div = _new(document, "div", "publication-image")
    if publication.get("image"):
        image_div.append(_new(document, "img", src=_text(publication["image"]), alt=_text(publication.get("title"))))
    else:
        _append_markup(image_div, PUBLICATION_PLACEHOLDER_SVG)

    content_div = _new(document, "div", "publication-content")
    content_div.append(
        _new(document, "span", "publication-venue", text=_join(publication.get("venue"), publication.get("year")))
    )
    content_div.append(_new(document, "h3", "publication-title", text=_text(publication.get("title"))))
    authors = _new(document, "p", "publication-authors")
    set_html_content(authors, publication.get("authors") or "")
    content_div.append(authors)
    description = _new(document, "p", "publication-description")
    set_html_content(description, publication.get("description") or "")
    content_div.append(description)
    links_div = _new(document, "div", "publication-links")
    _publication_links(document, publication.get("links"), links_div)
    content_div.append(links_div)

    article.append(image_div)
    article.append(content_div)
    return article


def render_publications(document: BeautifulSoup, publications: dict[str, Any] | None, profile: dict[str, Any] | None) -> None:
    grid = _element(document, "publications-grid")
    if grid is not None and publications and publications.get("publications"):
        grid.clear()
        for publication in publications["publications"]:
            grid.append(create_publication_card(document, publication))

    cta = _element(document, "publications-cta")
    scholar = ((profile or {}).get("social") or {}).get("google_scholar")
    if cta is not None and scholar:
        cta.clear()
        cta.append(_new(document, "a", "btn btn-outline", text=SCHOLAR_CTA_TEXT, href=_text(scholar), target=EXTERNAL_TARGET, rel=EXTERNAL_REL))


def _contact_item(document: BeautifulSoup, icon: str, title: str) -> tuple[Tag, Tag]:
    item = _new(document, "div", "contact-item")
    icon_div = _new(document, "div", "contact-icon")
    _append_markup(icon_div, icon)
    details = _new(document, "div", "contact-details")
    details.append(_new(document, "h3", text=title))
    item.append(icon_div)
    item.append(details)
    return item, details


def create_contact_item(document: BeautifulSoup, icon: str, title: str, link_text: str, href: str, external: bool = False) -> Tag:
    item, details = _contact_item(document, icon, title)
    link = _new(document, "a", text=link_text, href=href)
    if external:
        link["target"] = EXTERNAL_TARGET
        link["rel"] = EXTERNAL_REL
    details.append(link)
    return item


def create_contact_item_with_text(document: BeautifulSoup, icon: str, title: str, text: str) -> Tag:
    item, details = _contact_item(document, icon, title)
    p = _new(document, "p")
    lines = [line for line in text.split("\n") if line.strip()]
    for index, line in enumerate(lines):
        p.append(line)
        if index < len(lines) - 1:
            p.append(document.new_tag("br"))
    details.append(p)
    return item


def render_contact(document: BeautifulSoup, profile: dict[str, Any] | None) -> None:
    if not profile:
        return

    contact_info = _element(document, "contact-info")
    contact = profile.get("contact")
    social = profile.get("social") or {}
    if contact_info is not None and contact:
        contact_info.clear()
        if contact.get("email"):
            email = _text(contact["email"])
            contact_info.append(create_contact_item(document, EMAIL_ICON, "Email", email, f"mailto:{email}"))
        location = contact.get("location")
        if location:
            text = f"{_text(location.get('department'))}\n{_text(location.get('institution'))}"
            contact_info.append(create_contact_item_with_text(document, LOCATION_ICON, "Location", text))
        if social.get("linkedin"):
            contact_info.append(
                create_contact_item(document, LINKEDIN_ICON, "LinkedIn", LINKEDIN_CTA_TEXT, _text(social["linkedin"]), external=True)
            )

    social_links = _element(document, "social-links")
    if social_links is not None and profile.get("social"):
        social_links.clear()
        render_social_links(document, social_links, profile["social"], "social-link")


def render_footer(document: BeautifulSoup, profile: dict[str, Any] | None) -> None:
    if not profile or not profile.get("footer"):
        return
    footer = profile["footer"]
    footer_name = _element(document, "footer-name")
    if footer_name is not None:
        footer_name.string = _text(footer.get("copyright_name"))
    footer_note = _element(document, "footer-note")
    if footer_note is not None:
        footer_note.string = _text(footer.get("note"))


def set_current_year(document: BeautifulSoup, year: int | None = None) -> None:
    current_year = _element(document, "current-year")
    if current_year is not None:
        current_year.string = str(year or datetime.now().year)


def prepare_scroll_animations(document: BeautifulSoup) -> None:
    # The observer itself lives in the browser runtime; only the staggering is static.
    for index, element in enumerate(document.select(".stat-item, .contact-item")):
        _add_class(element, "fade-in")
        _set_style(element, "transition-delay", f"{index * STAGGER_MS}ms")


def render_page(document: BeautifulSoup, portfolio: Portfolio, year: int | None = None) -> BeautifulSoup:
    render_profile(document, portfolio.profile)
    render_news(document, portfolio.news)
    render_publications(document, portfolio.publications, portfolio.profile)
    render_contact(document, portfolio.profile)
    render_footer(document, portfolio.profile)
    set_current_year(document, year)
    prepare_scroll_animations(document)
    return document
