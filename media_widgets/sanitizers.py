from __future__ import annotations

import re
from urllib.parse import urlsplit

import bleach
from django.core.exceptions import ValidationError
from django.utils.html import strip_tags

ALLOWED_PROTOCOLS = frozenset(
    {
        "http",
        "https",
        "ftp",
        "ftps",
        "mailto",
        "news",
        "irc",
        "gopher",
        "nntp",
        "feed",
        "telnet",
        "mms",
        "rtsp",
        "sms",
        "svn",
        "tel",
        "fax",
        "xmpp",
        "webcal",
        "urn",
    }
)

# Inline markup allowed in captions and track listings.
ALLOWED_TAGS = frozenset(
    {
        "a",
        "abbr",
        "b",
        "br",
        "cite",
        "code",
        "del",
        "em",
        "i",
        "ins",
        "mark",
        "q",
        "s",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "track",
        "u",
    }
)

ALLOWED_ATTRIBUTES = {
    "a": ["href", "title", "rel", "target", "class"],
    "abbr": ["title"],
    "span": ["class", "title"],
    "track": ["src", "srclang", "label", "kind", "default"],
    "q": ["cite"],
}

_WHITESPACE_RE = re.compile(r"\s+")
_URL_STRIP_RE = re.compile(r"[^a-zA-Z0-9\-~+_.?#=!&;,/:%@$|*'()\[\]\x80-\U0010ffff]")
_PHP_STYLE_RE = re.compile(r"^[a-z0-9-]+?\.php", re.IGNORECASE)
_ID_RE = re.compile(r"^\d+$")
# A "<" that would open a tag; a lone "<" in plain text is kept.
_TAG_OPEN_RE = re.compile(r"<(?=[A-Za-z/!?])")
_HOST_RE = re.compile(r"[^\W_]")


def sanitize_text_field(value: str) -> str:
    """Plain single-line text: tags (and their attributes) removed, whitespace collapsed."""
    text = strip_tags(value)
    text = _TAG_OPEN_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def sanitize_html(value: str) -> str:
    """Allow-list HTML cleaning; running it twice gives the same result as once."""
    return bleach.clean(
        value,
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
    )


def sanitize_url(value: str) -> str:
    url = value.strip()
    if not url:
        return ""

    url = url.replace(" ", "%20")
    url = _URL_STRIP_RE.sub("", url)
    if not url:
        raise ValidationError("URL has no usable characters.", code="invalid_url")

    if ":" not in url and url[0] not in "/#?" and not _PHP_STYLE_RE.match(url):
        url = f"http://{url}"

    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise ValidationError("URL could not be parsed.", code="invalid_url") from exc

    if not parts.scheme:
        if url[0] in "/#?" or _PHP_STYLE_RE.match(url):
            return url
        raise ValidationError("URL has no scheme.", code="invalid_url")
    if parts.scheme.lower() not in ALLOWED_PROTOCOLS:
        raise ValidationError(
            f"URL protocol '{parts.scheme}' is not allowed.", code="invalid_url"
        )
    if parts.scheme.lower() in ("http", "https") and not _HOST_RE.search(parts.hostname or ""):
        raise ValidationError("URL is missing a host.", code="invalid_url")
    return url


def sanitize_id_list(value: str) -> str:
    """Comma separated attachment ids, order kept, duplicates and zero removed."""
    ids: list[str] = []
    for token in value.split(","):
        token = token.strip()
        if not token:
            continue
        if not _ID_RE.match(token):
            raise ValidationError(f"'{token}' is not an attachment id.", code="invalid_ids")
        token = str(int(token))
        if token != "0" and token not in ids:
            ids.append(token)
    return ",".join(ids)


def parse_id_list(value) -> list[int]:
    if not value:
        return []
    try:
        return [int(token) for token in sanitize_id_list(str(value)).split(",") if token]
    except ValidationError:
        return []
