"""Localized interface strings for the documentation site.

``zh-CN`` is the default label set; ``en-US`` serves English deployments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

__all__ = ["LOCALES", "LocaleStrings", "get_locale"]


@dataclass(frozen=True, slots=True)
class LocaleStrings:
    """Every user-visible label the generated configuration contains.

    ``category_home`` is a format string receiving ``category``.
    """

    lang: str
    title: str
    description: str
    home: str
    category_home: str
    doc_footer_prev: str
    doc_footer_next: str
    footer_message: str
    footer_copyright: str
    search_button_text: str
    search_button_aria_label: str
    search_no_results: str
    search_reset_title: str
    search_select: str
    search_navigate: str
    search_close: str
    outline_label: str
    return_to_top: str
    sidebar_menu: str
    dark_mode_switch: str
    light_mode_switch_title: str
    dark_mode_switch_title: str
    last_updated: str
    edit_link: str
    not_found_title: str
    not_found_quote: str
    not_found_link_label: str
    not_found_link_text: str


LOCALES: Final[dict[str, LocaleStrings]] = {
    "zh-CN": LocaleStrings(
        lang="zh-CN",
        title="我的文档",
        description="基于 VitePress 构建的文档站点，支持多级目录",
        home="首页",
        category_home="{category}首页",
        doc_footer_prev="上一篇",
        doc_footer_next="下一篇",
        footer_message="文档使用 VitePress 构建",
        footer_copyright="© {year} 我的文档 | 保留所有权利",
        search_button_text="搜索文档",
        search_button_aria_label="搜索文档",
        search_no_results="无法找到相关结果",
        search_reset_title="清除查询条件",
        search_select="选择",
        search_navigate="切换",
        search_close="关闭",
        outline_label="本页目录",
        return_to_top="返回顶部",
        sidebar_menu="菜单",
        dark_mode_switch="主题切换",
        light_mode_switch_title="切换到亮色模式",
        dark_mode_switch_title="切换到暗色模式",
        last_updated="最后更新于",
        edit_link="在 GitHub 上编辑此页",
        not_found_title="页面未找到",
        not_found_quote="可能是链接失效或页面已被移动。",
        not_found_link_label="返回首页",
        not_found_link_text="返回首页",
    ),
    "en-US": LocaleStrings(
        lang="en-US",
        title="My Docs",
        description="A VitePress documentation site with nested directories",
        home="Home",
        category_home="{category} Home",
        doc_footer_prev="Previous page",
        doc_footer_next="Next page",
        footer_message="Built with VitePress",
        footer_copyright="© {year} My Docs | All rights reserved",
        search_button_text="Search docs",
        search_button_aria_label="Search docs",
        search_no_results="No results for",
        search_reset_title="Clear query",
        search_select="to select",
        search_navigate="to navigate",
        search_close="to close",
        outline_label="On this page",
        return_to_top="Return to top",
        sidebar_menu="Menu",
        dark_mode_switch="Appearance",
        light_mode_switch_title="Switch to light theme",
        dark_mode_switch_title="Switch to dark theme",
        last_updated="Last updated",
        edit_link="Edit this page on GitHub",
        not_found_title="PAGE NOT FOUND",
        not_found_quote="The link may be broken or the page may have moved.",
        not_found_link_label="Go to home",
        not_found_link_text="Take me home",
    ),
}


def get_locale(name: str) -> LocaleStrings:
    """Return the strings for locale ``name``.

    Raises
    ------
    KeyError
        If ``name`` is not a known locale.
    """
    try:
        return LOCALES[name]
    except KeyError:
        message = f"Unknown locale {name!r}; expected one of {sorted(LOCALES)}"
        raise KeyError(message) from None
