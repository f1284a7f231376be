"""Typed settings for sidebar generation and the site configuration.

Values are read from ``DOCSITE_*`` environment variables through
``pydantic_settings.BaseSettings``. Validation errors surface as
:class:`docsite_common.errors.SettingsError` carrying the individual Pydantic
errors so callers can fail fast with a Problem Details payload.

Examples
--------
>>> load_settings(root_categories="guides,reference").root_categories
('guides', 'reference')
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, Final, Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from docsite_common.errors import SettingsError
from docsite_common.logging import get_logger
from docsite_nav.locales import get_locale
from docsite_nav.sidebar import SidebarOptions

__all__: Final[list[str]] = [
    "DEFAULT_ROOT_CATEGORIES",
    "DocsiteSettings",
    "load_settings",
]

logger = get_logger(__name__)

DEFAULT_ROOT_CATEGORIES: Final[tuple[str, ...]] = ("学习", "工作", "兴趣")


class DocsiteSettings(BaseSettings):
    """Sidebar and site settings (``DOCSITE_*`` namespace)."""

    model_config = SettingsConfigDict(env_prefix="DOCSITE_", case_sensitive=False, extra="ignore")

    docs_dir: Path = Field(
        default=Path("docs"), description="Directory holding one subdirectory per category"
    )
    root_categories: Annotated[tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_ROOT_CATEGORIES,
        description="Top-level categories, comma-separated or a JSON list",
    )
    index_name: str = Field(default="index.md", description="Per-directory index document")
    document_extension: str = Field(default=".md", description="Extension of content documents")
    sort_entries: bool = Field(
        default=False, description="Sort entries by name instead of filesystem order"
    )
    follow_symlinks: bool = Field(default=True, description="Descend into symlinked directories")
    collapse_from_depth: int = Field(
        default=1, ge=0, description="Groups at this depth or deeper start collapsed"
    )
    locale: Literal["zh-CN", "en-US"] = Field(
        default="zh-CN", description="Locale used for generated labels"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level for the CLI"
    )
    validate_output: bool = Field(
        default=True, description="Validate the generated sidebar against its JSON Schema"
    )

    title: str | None = Field(default=None, description="Site title; locale default when unset")
    description: str | None = Field(
        default=None, description="Site description; locale default when unset"
    )
    base: str = Field(default="/", description="Public base path of the deployed site")
    logo: str = Field(default="/logo.svg", description="Logo shown in the navigation bar")
    appearance: Literal["dark", "light", "force-dark"] | bool = Field(
        default="dark", union_mode="left_to_right", description="Default colour scheme"
    )
    github_url: str = Field(default="https://github.com", description="GitHub social link")
    edit_link_pattern: str = Field(
        default="https://github.com/wuhaotdcq-s/your-repo/edit/main/docs/:path",
        description="Edit-this-page URL pattern; ':path' is replaced by the page path",
    )
    copyright_year: int | None = Field(
        default=None, description="Year shown in the footer; current year when unset"
    )
    dev_server_port: int = Field(default=3000, ge=1, le=65535, description="Dev server port")
    dev_server_host: bool | str = Field(
        default=True,
        union_mode="left_to_right",
        description="Dev server host; true listens on all addresses",
    )
    build_minify: Literal["terser", "esbuild"] | bool = Field(
        default="terser",
        union_mode="left_to_right",
        description="Minifier used for production builds",
    )
    chunk_size_warning_limit: int = Field(
        default=1000, ge=0, description="Chunk size (kB) above which the build warns"
    )

    @field_validator("root_categories", mode="before")
    @classmethod
    def _normalise_categories(cls, value: object) -> tuple[str, ...]:
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("["):
                value = json.loads(stripped)
            else:
                return tuple(part.strip() for part in stripped.split(",") if part.strip())
        if isinstance(value, (list, tuple)):
            return tuple(str(part).strip() for part in value if str(part).strip())
        message = "root_categories must be a comma-separated string or a sequence"
        raise ValueError(message)

    @field_validator("root_categories")
    @classmethod
    def _reject_path_separators(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for name in value:
            if "/" in name or "\\" in name or name in {".", ".."}:
                message = f"root category {name!r} must be a single directory name"
                raise ValueError(message)
        return value

    @field_validator("document_extension")
    @classmethod
    def _require_leading_dot(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(".") or len(value) < 2:  # noqa: PLR2004
            message = "document_extension must look like '.md'"
            raise ValueError(message)
        return value

    @field_validator("base")
    @classmethod
    def _slash_wrapped_base(cls, value: str) -> str:
        if not value.startswith("/") or not value.endswith("/"):
            message = "base must start and end with '/'"
            raise ValueError(message)
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    def sidebar_options(self) -> SidebarOptions:
        """Return the scanner options described by these settings."""
        return SidebarOptions(
            index_name=self.index_name,
            document_extension=self.document_extension,
            sort_entries=self.sort_entries,
            follow_symlinks=self.follow_symlinks,
            collapse_from_depth=self.collapse_from_depth,
            home_label=get_locale(self.locale).category_home,
        )


def load_settings(
    settings_factory: Callable[[], DocsiteSettings] | None = None,
    **overrides: object,
) -> DocsiteSettings:
    """Instantiate settings with structured error handling.

    Parameters
    ----------
    settings_factory : Callable[[], DocsiteSettings] | None, optional
        Zero-argument factory. Defaults to constructing :class:`DocsiteSettings`
        with ``overrides``.
    **overrides : object
        Field values taking precedence over the environment.

    Returns
    -------
    DocsiteSettings
        Validated settings.

    Raises
    ------
    SettingsError
        When validation fails; the Pydantic errors are attached.
    """
    factory = settings_factory or (lambda: DocsiteSettings(**overrides))  # type: ignore[arg-type]
    try:
        return factory()
    except ValidationError as exc:
        errors = tuple(
            {
                "loc": [str(part) for part in error.get("loc", ())],
                "msg": str(error.get("msg", "")),
                "type": str(error.get("type", "")),
            }
            for error in exc.errors()
        )
        logger.exception(
            "Settings validation failed",
            extra={"operation": "settings.load", "error_count": len(errors)},
        )
        message = "Failed to load docsite settings"
        raise SettingsError(
            message, errors=errors, cause=exc, settings_class=DocsiteSettings.__name__
        ) from exc
