"""
Pydantic models for items returned by the paginated collections.

Each model decodes one raw JSON element with `from_value`. Decoding is
best-effort: missing or mistyped fields become empty strings (or None where
the field is optional), and only a non-object element is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict

from .navigation import find_path

CATEGORY_PREFIX = "Category: "


def _str(value: Any, *path: str | int) -> str:
    found = find_path(value, *path)
    return found if isinstance(found, str) else ""


@dataclass(frozen=True)
class Identifier:
    """
    Title-or-pageid discriminator addressing a single page.

    Attributes:
        param: Query parameter carrying the value ("titles" or "pageids")
        value: The title or page id
    """

    param: str
    value: str

    @classmethod
    def by_title(cls, title: str) -> Identifier:
        return cls("titles", title)

    @classmethod
    def by_pageid(cls, pageid: str) -> Identifier:
        return cls("pageids", pageid)

    @property
    def is_title(self) -> bool:
        return self.param == "titles"

    def query_param(self) -> tuple[str, str]:
        return (self.param, self.value)


class Image(BaseModel):
    """
    Image used on a page.

    Decoded from one page of a `generator=images&prop=imageinfo` response;
    the URLs come from the first imageinfo entry.
    """

    model_config = ConfigDict(frozen=True)

    url: str = ""
    title: str = ""
    description_url: str = ""

    @classmethod
    def from_value(cls, value: Any) -> Image | None:
        if not isinstance(value, dict):
            return None
        return cls(
            url=_str(value, "imageinfo", 0, "url"),
            title=_str(value, "title"),
            description_url=_str(value, "imageinfo", 0, "descriptionurl"),
        )


class Reference(BaseModel):
    """
    External link (reference) on a page.

    The API returns protocol-relative URLs ("//example.com/a"); those get an
    "http:" scheme so the result is always absolute.
    """

    model_config = ConfigDict(frozen=True)

    url: str = ""

    @classmethod
    def from_value(cls, value: Any) -> Reference | None:
        if not isinstance(value, dict):
            return None
        url = _str(value, "*")
        if url and not url.startswith(("http:", "https:")):
            url = f"http:{url}"
        return cls(url=url)


class Link(BaseModel):
    """Internal link to another article."""

    model_config = ConfigDict(frozen=True)

    title: str = ""

    @classmethod
    def from_value(cls, value: Any) -> Link | None:
        if not isinstance(value, dict):
            return None
        return cls(title=_str(value, "title"))


class Category(BaseModel):
    """Category the page belongs to, without the "Category: " prefix."""

    model_config = ConfigDict(frozen=True)

    title: str = ""

    @classmethod
    def from_value(cls, value: Any) -> Category | None:
        if not isinstance(value, dict):
            return None
        title = _str(value, "title")
        if title.startswith(CATEGORY_PREFIX):
            title = title[len(CATEGORY_PREFIX):]
        return cls(title=title)


class LangLink(BaseModel):
    """
    Link to the same article in another language.

    Attributes:
        lang: Language code
        title: Page title in that language, None if the API omits it
    """

    model_config = ConfigDict(frozen=True)

    lang: str = ""
    title: str | None = None

    @classmethod
    def from_value(cls, value: Any) -> LangLink | None:
        if not isinstance(value, dict):
            return None
        title = value.get("*")
        return cls(
            lang=_str(value, "lang"),
            title=title if isinstance(title, str) else None,
        )
