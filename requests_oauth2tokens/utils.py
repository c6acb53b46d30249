"""Url helpers used to build the Authorization Server endpoints."""

from __future__ import annotations

from furl import Path, furl  # type: ignore[import-untyped]


def join_path(base: str, *segments: str) -> str:
    """Append path segments to a base url.

    Trailing and duplicate slashes in the base url are normalized, so that
    `join_path("https://as.local/oauth/", "token")` returns `https://as.local/oauth/token`.

    """
    url = furl(base)
    url.path = Path(str(url.path).rstrip("/"))
    for segment in segments:
        url.path.add(segment)
    url.path.normalize()
    return str(url)


def https_url_problem(url: str) -> str | None:
    """Tell why `url` is not suitable as an HTTPS server url, or return `None` if it is."""
    parsed = furl(url)
    if parsed.scheme != "https":
        return "must use https"
    if not parsed.host:
        return "must include a host"
    if parsed.username or parsed.password:
        return "must not include credentials"
    return None
