"""Selects the extraction route for a document from its URL and content type."""

from urllib.parse import urlsplit

from app.extraction.models import FormatClass

_PDF_SUFFIXES = frozenset({"pdf"})
_WORD_SUFFIXES = frozenset({"docx", "doc"})


def extension_from_url(url: str | None) -> str:
    """Return the lowercased text after the last dot in the URL path, or "" if there is none.

    Unparsable URLs degrade to "" instead of raising. A trailing slash is
    kept, so "/cv.pdf/" yields "pdf/" and does not classify as PDF.
    """
    if not url:
        return ""
    try:
        path = urlsplit(url).path
    except ValueError:
        return ""
    if "." not in path:
        return ""
    return path.rpartition(".")[2].lower()


def url_for_log(url: str | None) -> str:
    """Return scheme, host and path only; query, fragment and credentials are dropped."""
    if not url:
        return ""
    try:
        parts = urlsplit(url)
        host = parts.hostname or ""
        if parts.port is not None:
            host = f"{host}:{parts.port}"
    except ValueError:
        return "<unparsable url>"
    if not parts.scheme:
        return parts.path
    return f"{parts.scheme}://{host}{parts.path}"


def classify_parts(extension: str, content_type: str) -> FormatClass:
    extension = extension.lower()
    content_type = content_type.lower()
    if extension in _PDF_SUFFIXES:
        return FormatClass.PDF
    if extension in _WORD_SUFFIXES:
        return FormatClass.WORD
    if "pdf" in content_type:
        return FormatClass.PDF
    if "word" in content_type or "officedocument" in content_type:
        return FormatClass.WORD
    return FormatClass.PLAIN


def classify(url: str | None, content_type: str | None) -> FormatClass:
    """URL suffix first, content-type substring second, plain text otherwise."""
    return classify_parts(extension_from_url(url), content_type or "")
