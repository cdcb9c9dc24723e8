from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional
from urllib.parse import urlparse

from depgraph.errors import InvalidRepositoryError

CENTRAL_URL = "https://repo1.maven.org/maven2/"
ALLOWED_SCHEMES = ("file", "http", "https")

# Whitespace, controls and characters RFC 3986 never allows in a URI.
_ILLEGAL_URI_CHARS = re.compile(r'[\s\x00-\x1f\x7f<>"{}|\\^`]')
_HOST_LABEL = re.compile(r"^[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?$")


@dataclass(frozen=True, slots=True)
class RemoteRepository:
    id: str
    url: str
    protocol: str


def repository_from_url(url: str) -> RemoteRepository:
    """Validate a repository URL and wrap it as a remote repository.

    Raises InvalidRepositoryError when the URL cannot be parsed, contains
    characters not legal in a URI, has no valid host (or path for file:),
    or its scheme is not one of ALLOWED_SCHEMES.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidRepositoryError(f"Invalid URL syntax: {url!r}")
    if _ILLEGAL_URI_CHARS.search(url):
        raise InvalidRepositoryError(f"Invalid URL syntax: {url!r}")
    try:
        parsed = urlparse(url)
        # Accessing the port validates it.
        parsed.port
    except ValueError as exc:
        raise InvalidRepositoryError(f"Invalid URL syntax: {url}") from exc

    scheme = parsed.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        raise InvalidRepositoryError(
            f"Scheme: '{scheme}' is not in {list(ALLOWED_SCHEMES)}"
        )
    if scheme == "file":
        if not parsed.path:
            raise InvalidRepositoryError(f"Invalid URL syntax: {url}")
    elif not _is_valid_host(parsed.hostname):
        raise InvalidRepositoryError(f"Invalid host in URL: {url}")

    return RemoteRepository(id=_repository_id(url, parsed.hostname, parsed.path),
                            url=url, protocol=scheme)


def _is_valid_host(hostname: Optional[str]) -> bool:
    if not hostname:
        return False
    try:
        ipaddress.ip_address(hostname)
        return True
    except ValueError:
        pass
    labels = hostname.rstrip(".").split(".")
    return len(hostname) <= 253 and all(_HOST_LABEL.match(label) for label in labels)


def _repository_id(url: str, hostname: Optional[str], path: str) -> str:
    if url.rstrip("/") == CENTRAL_URL.rstrip("/"):
        return "central"
    if hostname:
        return hostname
    return path.strip("/").replace("/", "-") or "local"


class RepositoryRegistry:
    """Ordered, immutable list of remote repositories used for every request."""

    def __init__(self, urls: Optional[Iterable[str]] = None):
        if urls is None:
            urls = [CENTRAL_URL]
        if isinstance(urls, str):
            urls = [urls]
        self._repositories: tuple[RemoteRepository, ...] = tuple(
            repository_from_url(url) for url in urls
        )

    @property
    def repositories(self) -> tuple[RemoteRepository, ...]:
        return self._repositories

    @property
    def urls(self) -> list[str]:
        return [repository.url for repository in self._repositories]

    def __iter__(self) -> Iterator[RemoteRepository]:
        return iter(self._repositories)

    def __len__(self) -> int:
        return len(self._repositories)

    def __repr__(self) -> str:
        return f"RepositoryRegistry({self.urls!r})"
