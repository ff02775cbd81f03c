"""
Client configuration.

The API URL is assembled from three parts so the language can be switched
without rebuilding the whole URL:

    pre_language_url + language + post_language_url

Page-size hints are sent verbatim as the per-request limit of each paginated
collection. They accept a positive integer or the literal "max".
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

LANGUAGE_URL_MARKER = "{language}"
MAX_RESULTS = "max"


class WikipediaConfig(BaseModel):
    """
    Settings shared by every request issued through one Wikipedia client.

    Assignments are validated, so `config.images_results = 5` is stored as "5"
    and `config.images_results = "lots"` is rejected.
    """

    model_config = ConfigDict(validate_assignment=True)

    pre_language_url: str = "https://"
    language: str = "en"
    post_language_url: str = ".wikipedia.org/w/api.php"

    # Number of results to fetch when searching.
    search_results: int = 10

    # Page sizes for the paginated collections. The iterators go through every
    # item regardless; these only bound each request.
    images_results: str = MAX_RESULTS
    links_results: str = MAX_RESULTS
    categories_results: str = MAX_RESULTS

    @field_validator("images_results", "links_results", "categories_results", mode="before")
    @classmethod
    def _page_size(cls, v: object) -> str:
        if isinstance(v, bool):
            raise ValueError("page size must be a positive integer or 'max'")
        if isinstance(v, int):
            v = str(v)
        if not isinstance(v, str):
            raise ValueError("page size must be a positive integer or 'max'")
        if v == MAX_RESULTS or (v.isdigit() and int(v) > 0):
            return v
        raise ValueError("page size must be a positive integer or 'max'")

    @field_validator("search_results")
    @classmethod
    def _search_results(cls, v: int) -> int:
        if v < 1:
            raise ValueError("search_results must be positive")
        return v

    def base_url(self) -> str:
        """
        Return the API URL.

        Example:
            >>> WikipediaConfig(language="es").base_url()
            'https://es.wikipedia.org/w/api.php'
        """
        return f"{self.pre_language_url}{self.language}{self.post_language_url}"

    def set_base_url(self, base_url: str) -> None:
        """
        Update the URL template.

        The substring "{language}" is replaced by the selected language. A
        template without the marker is used as the whole URL and the language
        is cleared.

        Example:
            >>> config = WikipediaConfig(language="es")
            >>> config.set_base_url("https://hello.{language}.world/")
            >>> config.base_url()
            'https://hello.es.world/'
        """
        index = base_url.find(LANGUAGE_URL_MARKER)
        if index == -1:
            self.pre_language_url = base_url
            self.language = ""
            self.post_language_url = ""
            return
        self.pre_language_url = base_url[:index]
        self.post_language_url = base_url[index + len(LANGUAGE_URL_MARKER):]
