"""Build the self-contained HTML tree-browser document.

The document shell is assembled with :mod:`lxml.html`; stylesheet and
browser script are packaged assets inlined verbatim, and the forest is
embedded as a JSON data block that the script reads at load time.
"""

from __future__ import annotations

import importlib.resources as pkg_resources
import json
import logging
from typing import Any, Dict, List, Optional

from lxml import etree as ET
from lxml import html as lxml_html
from lxml.html.builder import E

from classification_viewer.core.models import ClassificationNode, SystemConfig, TransformResult

logger = logging.getLogger(__name__)

__all__ = ["build_viewer_document", "render_payload", "load_asset"]

_ASSET_PACKAGE = "classification_viewer.core.generators.assets"

_DEFAULT_DOCUMENT = {
    "author": "Takeoff and Estimating Pty Ltd",
    "site_url": "https://takeoffandestimating.com.au",
    "site_name": "Takeoff and Estimating",
}

_FAVICON = (
    "data:image/svg+xml,<svg xmlns='http://www.w3.org/2000/svg' viewBox='0 0 100 100'>"
    "<rect fill='%23ffc629' width='100' height='100' rx='12'/>"
    "<text x='50' y='68' font-size='42' text-anchor='middle' fill='%23002d74' "
    "font-family='Arial' font-weight='bold'>T%26E</text></svg>"
)

_FONTS = (
    "https://fonts.googleapis.com/css2?family=Poppins:wght@400;500;600;700"
    "&family=JetBrains+Mono:wght@400;500;600&display=swap"
)

# Characters that could terminate or confuse the <script> element holding the payload
_SCRIPT_UNSAFE = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026"}


def load_asset(name: str) -> str:
    """Return the text of a packaged asset (``viewer.css`` / ``viewer.js``)."""
    return pkg_resources.files(_ASSET_PACKAGE).joinpath(name).read_text(encoding="utf-8")


def render_payload(forest: List[ClassificationNode]) -> str:
    """Serialize *forest* to JSON safe for inclusion inside a script element."""
    text = json.dumps([node.to_dict() for node in forest], ensure_ascii=False, indent=2)
    for char, escaped in _SCRIPT_UNSAFE.items():
        text = text.replace(char, escaped)
    return text


def _cls(name: str, **attrs: str) -> Dict[str, str]:
    attrs["class"] = name
    return attrs


def _head(config: SystemConfig, document: Dict[str, Any]) -> ET._Element:
    page_title = f"{config.title} | {document['site_name']}"
    css = load_asset("viewer.css")
    return E.head(
        E.meta(charset="UTF-8"),
        E.meta(name="viewport", content="width=device-width, initial-scale=1.0"),
        E.title(page_title),
        E.meta(name="description", content=config.description),
        E.meta(name="keywords", content=config.keywords),
        E.meta(name="author", content=document["author"]),
        E.meta(property="og:type", content="website"),
        E.meta(property="og:title", content=page_title),
        E.meta(property="og:description", content=config.description),
        E.meta(property="og:url", content=document["site_url"]),
        E.link(rel="icon", type="image/svg+xml", href=_FAVICON),
        E.link(rel="preconnect", href="https://fonts.googleapis.com"),
        E.link(rel="stylesheet", href=_FONTS),
        E.style(f":root {{ --system-accent: {config.accent_color}; }}\n" + css),
    )


def _header(config: SystemConfig, document: Dict[str, Any]) -> ET._Element:
    return E.header(
        _cls("app-header"),
        E.div(_cls("yellow-stripe")),
        E.div(
            _cls("header-main"),
            E.div(
                _cls("header-brand"),
                E.a(_cls("brand-logo", href=document["site_url"], target="_blank"), "T&E"),
                E.div(_cls("brand-divider")),
                E.div(
                    _cls("brand-title"),
                    E.span(_cls("app-name"), E.span(_cls("highlight"), config.title)),
                    E.span(_cls("version-badge"), config.version),
                ),
            ),
            E.div(
                _cls("header-actions"),
                E.div(
                    _cls("theme-toggle"),
                    E.button(_cls("theme-btn active", id="lightBtn", title="Light Mode"), "☀️"),
                    E.button(_cls("theme-btn", id="darkBtn", title="Dark Mode"), "🌙"),
                ),
            ),
        ),
        E.div(_cls("accent-stripe")),
    )


def _sidebar() -> ET._Element:
    return E.aside(
        _cls("sidebar"),
        E.div(
            _cls("search-container"),
            E.div(
                _cls("search-box"),
                E.input(type="text", id="searchInput", placeholder="Search codes or names... (Press /)"),
            ),
        ),
        E.div(
            _cls("tree-controls"),
            E.button(_cls("tree-btn", id="expandAll"), "Expand All"),
            E.button(_cls("tree-btn", id="collapseAll"), "Collapse All"),
            E.button(_cls("tree-btn", id="expandLevel1"), "Level 1"),
            E.button(_cls("tree-btn", id="expandLevel2"), "Level 2"),
        ),
        E.div(_cls("tree-container", id="treeContainer")),
    )


def _card(kind: str, heading: str, *content: ET._Element) -> ET._Element:
    return E.div(_cls(f"info-card {kind}"), E.h3(heading), *content)


def _stat(label: str, element_id: str) -> ET._Element:
    return E.div(
        _cls("stat"),
        E.span(_cls("stat-label"), label),
        E.span(_cls("stat-value", id=element_id), "0"),
    )


def _detail_panel(config: SystemConfig) -> ET._Element:
    empty_state = E.div(
        _cls("empty-state", id="emptyState"),
        E.div(_cls("empty-state-icon"), config.icon),
        E.h3("Select an item"),
        E.p("Click on any item in the tree to view its description and details"),
        E.p("Press ", E.kbd("/"), " to search"),
    )
    detail_view = E.div(
        {"id": "detailView", "style": "display: none;"},
        E.div(
            _cls("detail-header"),
            E.div(_cls("detail-breadcrumb", id="breadcrumb")),
            E.div(
                _cls("detail-title"),
                E.span(_cls("detail-code", id="detailCode")),
                E.span(_cls("detail-name", id="detailName")),
            ),
        ),
        E.div(
            _cls("detail-content"),
            _card("description", "Description", E.p(_cls("description-text", id="descriptionText"))),
            _card(
                "stats",
                "Statistics",
                E.div(
                    _cls("stats-grid"),
                    _stat("Direct Children", "statChildren"),
                    _stat("Total Descendants", "statDescendants"),
                    _stat("Hierarchy Level", "statLevel"),
                ),
            ),
            _card("hierarchy", "Hierarchy Path", E.div(_cls("hierarchy-path", id="hierarchyPath"))),
            _card("children", "Child Items", E.div(id="childrenContainer")),
        ),
    )
    return E.main(_cls("detail-panel"), empty_state, detail_view)


def _footer(config: SystemConfig, result: TransformResult, document: Dict[str, Any]) -> ET._Element:
    return E.footer(
        _cls("app-footer"),
        E.div(_cls("yellow-stripe")),
        E.div(
            _cls("footer-content"),
            E.div(
                E.strong(config.title),
                " Reference Tool by ",
                E.a({"href": document["site_url"], "target": "_blank"}, document["site_name"]),
            ),
            E.div(f"{result.total_items} items in {result.top_level_count} top-level groups"),
        ),
    )


def build_viewer_document(
    result: TransformResult,
    config: SystemConfig,
    *,
    viewer_settings: Optional[Dict[str, Any]] = None,
) -> str:
    """Return the complete HTML document for *result* styled by *config*.

    Parameters
    ----------
    result
        Output of the transform stage; its forest becomes the data payload.
    config
        Presentation settings of the selected classification system.
    viewer_settings
        The ``viewer.yml`` section; supplies debounce delay, theme storage key,
        the empty-description text and document branding.
    """
    settings = viewer_settings or {}
    document = dict(_DEFAULT_DOCUMENT)
    document.update(settings.get("document") or {})
    search = settings.get("search") or {}
    theme = settings.get("theme") or {}
    detail = settings.get("detail") or {}

    payload = E.script({"type": "application/json", "id": "treeData"})
    payload.text = render_payload(result.forest)
    script = E.script()
    script.text = load_asset("viewer.js")

    body = E.body(
        {
            "data-theme-key": str(theme.get("storage_key", "theme")),
            "data-search-delay": str(search.get("debounce_ms", 200)),
            "data-no-description": str(detail.get("no_description", "No description available.")),
            "data-separator": str(detail.get("breadcrumb_separator", "›")),
        },
        E.div(
            _cls("app-container"),
            _header(config, document),
            E.div(_cls("main-content"), _sidebar(), _detail_panel(config)),
            _footer(config, result, document),
        ),
        payload,
        script,
    )
    root = E.html({"lang": "en"}, _head(config, document), body)

    text = lxml_html.tostring(
        root,
        doctype="<!DOCTYPE html>",
        encoding="unicode",
        method="html",
        pretty_print=True,
    )
    logger.debug("Built viewer document for '%s' (%d characters)", config.key, len(text))
    return text
