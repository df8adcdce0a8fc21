"""Search options and client settings for yt-search."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource
from pydantic_settings import YamlConfigSettingsSource

from yt_search.core.constants import (
    CONTENT_TYPES,
    DEFAULT_CLIENT_VERSION,
    DEFAULT_SEARCH_PAGE_SIZE,
    DEFAULT_USER_AGENT,
    PLAYLIST_PAGE_SIZE_RANGE,
    SEARCH_PAGE_SIZE_RANGE,
    SORT_ORDERS,
)
from yt_search.core.errors import ErrorCode, YtSearchError


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="YT_SEARCH_",
        yaml_file="yt_search.yaml",
        yaml_file_encoding="utf-8",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    hl: str = "en"
    gl: str = "US"
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 30.0
    default_client_version: str = DEFAULT_CLIENT_VERSION
    verbose: bool = False


class SearchOptions(BaseModel):
    """Per-call search options.

    Values are checked by :func:`validate_search_options` rather than by
    field types so that bad input surfaces as a YtSearchError with the
    matching INVALID_* code.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    content_type: str = "video"
    sort_order: str = "relevance"
    page_size: int = DEFAULT_SEARCH_PAGE_SIZE


_OPTION_ERROR_CODES = {
    "content_type": ErrorCode.INVALID_TYPE,
    "sort_order": ErrorCode.INVALID_SORT,
    "page_size": ErrorCode.INVALID_LIMIT,
}

# Unknown keys that look like a field get that field's code.
_OPTION_KEY_ALIASES = {
    "type": "content_type",
    "sort": "sort_order",
    "sort_by": "sort_order",
    "limit": "page_size",
}


def validate_query(query: Any, code: ErrorCode, label: str) -> str:
    """Return the stripped identifier or raise ``code`` if it is blank."""
    if not isinstance(query, str) or not query.strip():
        raise YtSearchError(code, f"Invalid {label}. It must be a non-empty string.", {label: query})
    return query.strip()


def validate_search_options(options: SearchOptions | Mapping[str, Any] | None) -> SearchOptions:
    """Coerce and validate search options.

    Raises:
        YtSearchError: INVALID_TYPE, INVALID_SORT, or INVALID_LIMIT. Unknown keys
            such as ``type`` or ``limit`` raise the code of the field they
            resemble, and UNKNOWN otherwise.
    """
    if options is None:
        return SearchOptions()

    if not isinstance(options, SearchOptions):
        try:
            options = SearchOptions.model_validate(dict(options))
        except ValidationError as exc:
            error = exc.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else ""
            if error["type"] == "extra_forbidden":
                code = _OPTION_ERROR_CODES.get(_OPTION_KEY_ALIASES.get(field, field), ErrorCode.UNKNOWN)
                message = f"Unknown search option '{field}'. Expected one of: {', '.join(SearchOptions.model_fields)}"
            else:
                code = _OPTION_ERROR_CODES.get(field, ErrorCode.UNKNOWN)
                message = f"Invalid search options: {error['msg']}"
            raise YtSearchError(code, message, {"options": options}) from exc
        except (TypeError, ValueError) as exc:
            raise YtSearchError(
                ErrorCode.UNKNOWN, f"Invalid search options: {exc}", {"options": options}
            ) from exc

    if options.content_type not in CONTENT_TYPES:
        raise YtSearchError(
            ErrorCode.INVALID_TYPE,
            f"Invalid type option. Expected one of: {', '.join(CONTENT_TYPES)}",
            {"options": options.model_dump()},
        )
    if options.sort_order not in SORT_ORDERS:
        raise YtSearchError(
            ErrorCode.INVALID_SORT,
            f"Invalid sort option. Expected one of: {', '.join(SORT_ORDERS)}",
            {"options": options.model_dump()},
        )
    validate_page_size(options.page_size, SEARCH_PAGE_SIZE_RANGE)
    return options


def validate_page_size(page_size: Any, bounds: tuple[int, int] = PLAYLIST_PAGE_SIZE_RANGE) -> int:
    """Check that ``page_size`` is an int within ``bounds`` (inclusive)."""
    low, high = bounds
    if isinstance(page_size, bool) or not isinstance(page_size, int) or not low <= page_size <= high:
        raise YtSearchError(
            ErrorCode.INVALID_LIMIT,
            f"Invalid limit option. It must be a number between {low} and {high}.",
            {"page_size": page_size},
        )
    return page_size
