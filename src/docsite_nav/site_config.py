"""Site configuration consumed by the documentation framework.

:func:`build_site_config` assembles the full configuration (metadata, theme,
search, localized labels, head tags and dev-server/build flags) and embeds a
sidebar freshly scanned from the docs directory. Nothing is cached between
calls: every configuration load rescans the filesystem.

The models serialize with camelCase keys through :meth:`SiteConfig.to_dict`,
which is the payload written out for the framework.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from docsite_common.logging import get_logger, with_fields
from docsite_nav.locales import LocaleStrings, get_locale
from docsite_nav.schema import validate_sidebar
from docsite_nav.sidebar import SidebarBuildResult, build_tree, category_url

if TYPE_CHECKING:
    from docsite_nav.settings import DocsiteSettings

__all__ = [
    "KATEX_VERSION",
    "SiteConfig",
    "ThemeConfig",
    "build_site_config",
    "default_head",
]

LOGGER = get_logger(__name__)

KATEX_VERSION = "0.16.8"

HeadTag = tuple[str, dict[str, str]]


class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class NavItem(_ConfigModel):
    text: str
    link: str


class DocFooter(_ConfigModel):
    prev: str
    next: str


class SocialLink(_ConfigModel):
    icon: str
    link: str


class Footer(_ConfigModel):
    message: str
    copyright: str


class SearchButtonTranslations(_ConfigModel):
    button_text: str
    button_aria_label: str


class SearchModalFooterTranslations(_ConfigModel):
    select_text: str
    navigate_text: str
    close_text: str


class SearchModalTranslations(_ConfigModel):
    no_results_text: str
    reset_button_title: str
    footer: SearchModalFooterTranslations


class SearchTranslations(_ConfigModel):
    button: SearchButtonTranslations
    modal: SearchModalTranslations


class SearchOptions(_ConfigModel):
    detailed_view: bool = True
    translations: SearchTranslations


class SearchConfig(_ConfigModel):
    provider: Literal["local", "algolia"] = "local"
    options: SearchOptions


class Outline(_ConfigModel):
    level: tuple[int, int] = (2, 3)
    label: str


class LastUpdatedFormat(_ConfigModel):
    year: str = "numeric"
    month: str = "long"
    day: str = "numeric"
    hour: str = "2-digit"
    minute: str = "2-digit"


class LastUpdated(_ConfigModel):
    text: str
    format_options: LastUpdatedFormat = Field(default_factory=LastUpdatedFormat)


class EditLink(_ConfigModel):
    pattern: str
    text: str


class NotFound(_ConfigModel):
    title: str
    quote: str
    link_label: str
    link_text: str


class ThemeConfig(_ConfigModel):
    """``themeConfig`` section: navigation, sidebar and localized UI labels."""

    logo: str
    nav: list[NavItem]
    sidebar: dict[str, Any]
    doc_footer: DocFooter
    social_links: list[SocialLink]
    footer: Footer
    search: SearchConfig
    outline: Outline
    return_to_top_label: str
    sidebar_menu_label: str
    dark_mode_switch_label: str
    light_mode_switch_title: str
    dark_mode_switch_title: str
    last_updated: LastUpdated
    edit_link: EditLink
    not_found: NotFound


class KatexOptions(_ConfigModel):
    throw_on_error: bool = False
    error_color: str = "#cc0000"


class MarkdownConfig(_ConfigModel):
    katex: KatexOptions = Field(default_factory=KatexOptions)


class ViteServer(_ConfigModel):
    port: int = 3000
    host: bool | str = True


class ViteBuild(_ConfigModel):
    minify: bool | str = "terser"
    chunk_size_warning_limit: int = 1000


class ViteConfig(_ConfigModel):
    server: ViteServer = Field(default_factory=ViteServer)
    build: ViteBuild = Field(default_factory=ViteBuild)


class SiteConfig(_ConfigModel):
    """Top-level site configuration."""

    title: str
    description: str
    lang: str
    base: str = "/"
    markdown: MarkdownConfig = Field(default_factory=MarkdownConfig)
    theme_config: ThemeConfig
    appearance: bool | str = "dark"
    last_updated: bool = True
    head: list[HeadTag]
    vite: ViteConfig = Field(default_factory=ViteConfig)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible payload with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


def default_head() -> list[HeadTag]:
    """Return the stylesheet, script and meta tags injected into every page."""
    katex_base = f"https://cdn.jsdelivr.net/npm/katex@{KATEX_VERSION}/dist"
    return [
        ("link", {"rel": "stylesheet", "href": "/custom.css"}),
        ("link", {"rel": "stylesheet", "href": f"{katex_base}/katex.min.css"}),
        ("script", {"src": f"{katex_base}/katex.min.js"}),
        ("meta", {"name": "theme-color", "content": "#3eaf7c"}),
    ]


def _search_config(strings: LocaleStrings) -> SearchConfig:
    return SearchConfig(
        options=SearchOptions(
            translations=SearchTranslations(
                button=SearchButtonTranslations(
                    button_text=strings.search_button_text,
                    button_aria_label=strings.search_button_aria_label,
                ),
                modal=SearchModalTranslations(
                    no_results_text=strings.search_no_results,
                    reset_button_title=strings.search_reset_title,
                    footer=SearchModalFooterTranslations(
                        select_text=strings.search_select,
                        navigate_text=strings.search_navigate,
                        close_text=strings.search_close,
                    ),
                ),
            )
        )
    )


def _theme_config(
    settings: DocsiteSettings, strings: LocaleStrings, sidebar: dict[str, Any]
) -> ThemeConfig:
    year = settings.copyright_year or datetime.now(tz=UTC).year
    nav = [NavItem(text=strings.home, link="/")]
    nav.extend(NavItem(text=name, link=category_url(name)) for name in settings.root_categories)
    return ThemeConfig(
        logo=settings.logo,
        nav=nav,
        sidebar=sidebar,
        doc_footer=DocFooter(prev=strings.doc_footer_prev, next=strings.doc_footer_next),
        social_links=[SocialLink(icon="github", link=settings.github_url)],
        footer=Footer(
            message=strings.footer_message,
            copyright=strings.footer_copyright.format(year=year),
        ),
        search=_search_config(strings),
        outline=Outline(label=strings.outline_label),
        return_to_top_label=strings.return_to_top,
        sidebar_menu_label=strings.sidebar_menu,
        dark_mode_switch_label=strings.dark_mode_switch,
        light_mode_switch_title=strings.light_mode_switch_title,
        dark_mode_switch_title=strings.dark_mode_switch_title,
        last_updated=LastUpdated(text=strings.last_updated),
        edit_link=EditLink(pattern=settings.edit_link_pattern, text=strings.edit_link),
        not_found=NotFound(
            title=strings.not_found_title,
            quote=strings.not_found_quote,
            link_label=strings.not_found_link_label,
            link_text=strings.not_found_link_text,
        ),
    )


def build_site_config(
    settings: DocsiteSettings,
    *,
    sidebar: SidebarBuildResult | None = None,
) -> SiteConfig:
    """Assemble the site configuration for ``settings``.

    Parameters
    ----------
    settings : DocsiteSettings
        Validated settings.
    sidebar : SidebarBuildResult | None, optional
        Pre-built sidebar. When omitted the docs directory is scanned now and
        the scan diagnostics are logged.

    Returns
    -------
    SiteConfig
        Complete configuration model.

    Raises
    ------
    SchemaValidationError
        If ``settings.validate_output`` is set and the sidebar payload does
        not match the navigation schema.
    """
    strings = get_locale(settings.locale)
    with with_fields(LOGGER, operation="site_config.build") as log:
        if sidebar is None:
            sidebar = build_tree(
                settings.root_categories,
                settings.docs_dir,
                options=settings.sidebar_options(),
            )
            sidebar.diagnostics.emit(log)
        sidebar_payload = sidebar.to_dict()
        if settings.validate_output:
            validate_sidebar(sidebar_payload)
        log.debug("Site configuration assembled", extra={"category_count": len(sidebar_payload)})

    return SiteConfig(
        title=settings.title or strings.title,
        description=settings.description or strings.description,
        lang=strings.lang,
        base=settings.base,
        theme_config=_theme_config(settings, strings, dict(sidebar_payload)),
        appearance=settings.appearance,
        head=default_head(),
        vite=ViteConfig(
            server=ViteServer(port=settings.dev_server_port, host=settings.dev_server_host),
            build=ViteBuild(
                minify=settings.build_minify,
                chunk_size_warning_limit=settings.chunk_size_warning_limit,
            ),
        ),
    )
