"""Markup collaborators for players, galleries and captions.

Each handler takes a prop bag and returns markup. The defaults below render
templates under ``media_widgets/embeds/``; a site can point
``MEDIA_WIDGETS["EMBED_HANDLERS"]`` at its own callables instead.
"""
from __future__ import annotations

import itertools
import mimetypes
import random
from urllib.parse import urlsplit

from django.template.loader import render_to_string
from django.utils.module_loading import import_string
from django.utils.safestring import mark_safe

from .conf import get_setting
from .models import Attachment

_gallery_counter = itertools.count(1)

_EMBED_HOSTS = {
    "youtube.com": "video/youtube",
    "youtu.be": "video/youtube",
    "vimeo.com": "video/vimeo",
}


def get_embed_handler(name: str):
    return import_string(get_setting("EMBED_HANDLERS")[name])


def source_type(url: str, fallback: str = "") -> str:
    host = (urlsplit(url).hostname or "").lower()
    for suffix, mime in _EMBED_HOSTS.items():
        if host == suffix or host.endswith("." + suffix):
            return mime
    guessed, _encoding = mimetypes.guess_type(urlsplit(url).path)
    return guessed or fallback


def audio_embed(atts: dict) -> str:
    src = atts.get("src") or ""
    if not src:
        return ""
    return render_to_string(
        "media_widgets/embeds/audio.html",
        {
            "src": src,
            "type": source_type(src, "audio/mpeg"),
            "sources": _extra_sources(atts.get("sources")),
            "autoplay": bool(atts.get("autoplay")),
            "loop": bool(atts.get("loop")),
            "preload": atts.get("preload") or "none",
        },
    )


def video_embed(atts: dict, content: str = "") -> str:
    src = atts.get("src") or ""
    if not src:
        return ""
    return render_to_string(
        "media_widgets/embeds/video.html",
        {
            "src": src,
            "type": source_type(src, "video/mp4"),
            "sources": _extra_sources(atts.get("sources")),
            "autoplay": bool(atts.get("autoplay")),
            "loop": bool(atts.get("loop")),
            "preload": atts.get("preload") or "metadata",
            "poster": atts.get("poster") or "",
            "width": int(atts.get("width") or 640),
            "height": int(atts.get("height") or 360),
            "content": mark_safe(content or ""),
        },
    )


def gallery_embed(atts: dict) -> str:
    ids = list(atts.get("ids") or [])
    if not ids:
        return ""
    by_id = {a.pk: a for a in Attachment.objects.filter(pk__in=ids, mime_type__startswith="image/")}
    attachments = [by_id[pk] for pk in ids if pk in by_id]
    if atts.get("orderby") == "rand":
        random.shuffle(attachments)
    if not attachments:
        return ""

    size = atts.get("size") or "thumbnail"
    link = atts.get("link") or ""
    items = []
    for attachment in attachments:
        src, width, height = attachment.image_src(size)
        if link == "file":
            href = attachment.url
        elif link == "post":
            href = attachment.get_absolute_url()
        else:
            href = ""
        items.append(
            {
                "id": attachment.pk,
                "src": src,
                "width": width,
                "height": height,
                "alt": attachment.alt_text,
                "caption": attachment.caption,
                "href": href,
            }
        )
    return render_to_string(
        "media_widgets/embeds/gallery.html",
        {
            "gallery_id": f"gallery-{next(_gallery_counter)}",
            "columns": int(atts.get("columns") or 3),
            "size": size,
            "items": items,
        },
    )


def caption_embed(atts: dict, content: str) -> str:
    caption = atts.get("caption") or ""
    if not caption:
        return content
    return render_to_string(
        "media_widgets/embeds/caption.html",
        {
            "id": atts.get("id") or "",
            "width": int(atts.get("width") or 0),
            "align": atts.get("align") or "none",
            "caption": mark_safe(caption),
            "content": mark_safe(content),
        },
    )


def _extra_sources(sources) -> list[dict]:
    return [{"src": src, "type": source_type(src)} for src in (sources or []) if src]
