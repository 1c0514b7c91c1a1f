"""Front-end markup for each media kind.

Renderers receive an instance already merged with its schema defaults. A
missing or unusable attachment renders nothing rather than raising.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from django.forms.utils import flatatt
from django.utils.html import format_html

from .embeds import get_embed_handler
from .kinds import AUDIO_EXTENSIONS, VIDEO_EXTENSIONS, MediaKind
from .models import Attachment, resolve_attachment
from .sanitizers import parse_id_list, sanitize_html

logger = logging.getLogger(__name__)

Renderer = Callable[..., str]


class UnsupportedMediaKind(Exception):
    """Raised when no renderer is bound to a media kind."""


def render_image(instance: dict, widget_id: str = "") -> str:
    attachment = resolve_attachment(instance.get("attachment_id"), MediaKind.IMAGE.mime_type)
    if attachment is None and not instance.get("url"):
        return ""

    size = instance.get("size") or "full"
    width = int(instance.get("width") or 0)
    height = int(instance.get("height") or 0)
    if attachment is not None:
        if size == "custom":
            src = attachment.url
            width = width or attachment.width
            height = height or attachment.height
        else:
            src, width, height = attachment.image_src(size)
    else:
        src = instance["url"]

    caption = instance.get("caption") or (attachment.caption if attachment else "")
    align = instance.get("align") or "none"

    classes = ["image"]
    if attachment is not None:
        classes.append(f"wp-image-{attachment.pk}")
    if size != "custom":
        classes.append(f"attachment-{size} size-{size}")
    if not caption:
        classes.append(f"align{align}")
    classes.extend((instance.get("image_classes") or "").split())

    attrs = {
        "class": " ".join(classes),
        "src": src,
        "alt": instance.get("alt") or (attachment.alt_text if attachment else ""),
        "style": "max-width: 100%; height: auto;",
    }
    title = instance.get("image_title") or (attachment.title if attachment else "")
    if title:
        attrs["title"] = title
    if width:
        attrs["width"] = width
    if height:
        attrs["height"] = height
    image = format_html("<img{}>", flatatt(attrs))

    url = _image_link_url(instance, attachment)
    if url:
        link_attrs = {"href": url}
        if instance.get("link_classes"):
            link_attrs["class"] = instance["link_classes"]
        if instance.get("link_rel"):
            link_attrs["rel"] = instance["link_rel"]
        if instance.get("link_target_blank"):
            link_attrs["target"] = "_blank"
        image = format_html("<a{}>{}</a>", flatatt(link_attrs), image)

    if caption:
        image = get_embed_handler("caption")(
            {
                "id": f"{widget_id}-caption" if widget_id else "",
                "width": width,
                "align": align,
                "caption": sanitize_html(caption),
            },
            image,
        )
    return str(image)


def _image_link_url(instance: dict, attachment: Optional[Attachment]) -> str:
    link_type = instance.get("link_type")
    if link_type == "custom":
        return instance.get("link_url") or ""
    if link_type == "file":
        return attachment.url if attachment is not None else instance.get("url", "")
    if link_type == "post" and attachment is not None:
        return attachment.get_absolute_url()
    return ""


def _player_source(instance: dict, kind: MediaKind) -> tuple[Optional[Attachment], str]:
    attachment = resolve_attachment(instance.get("attachment_id"), kind.mime_type)
    if attachment is not None:
        return attachment, attachment.url
    return None, instance.get("url") or ""


def _link_to_media(attachment: Optional[Attachment], src: str, link_type: str) -> str:
    if attachment is None:
        return format_html('<a href="{}">{}</a>', src, src)
    href = attachment.url if link_type == "file" else attachment.get_absolute_url()
    return format_html('<a href="{}">{}</a>', href, attachment.title or attachment.filename)


def render_audio(instance: dict, widget_id: str = "") -> str:
    attachment, src = _player_source(instance, MediaKind.AUDIO)
    if not src:
        return ""
    if instance.get("link_type") in ("file", "post"):
        return _link_to_media(attachment, src, instance["link_type"])
    return get_embed_handler("audio")(
        {
            "src": src,
            "sources": [instance[ext] for ext in AUDIO_EXTENSIONS if instance.get(ext)],
            "autoplay": instance.get("autoplay", False),
            "loop": instance.get("loop", False),
            "preload": instance.get("preload", "none"),
        }
    )


def render_video(instance: dict, widget_id: str = "") -> str:
    attachment, src = _player_source(instance, MediaKind.VIDEO)
    if not src:
        return ""
    if instance.get("link_type") in ("file", "post"):
        return _link_to_media(attachment, src, instance["link_type"])
    return get_embed_handler("video")(
        {
            "src": src,
            "sources": [instance[ext] for ext in VIDEO_EXTENSIONS if instance.get(ext)],
            "autoplay": instance.get("autoplay", False),
            "loop": instance.get("loop", False),
            "preload": instance.get("preload", "none"),
            "poster": instance.get("poster", ""),
            "width": instance.get("width") or 640,
            "height": instance.get("height") or 360,
        },
        sanitize_html(instance.get("content") or ""),
    )


def render_gallery(instance: dict, widget_id: str = "") -> str:
    ids = parse_id_list(instance.get("ids"))
    if not ids:
        return ""
    atts = {
        "ids": ids,
        "columns": instance.get("columns") or 3,
        "size": instance.get("size") or "thumbnail",
        "link": "" if instance.get("link_type") == "none" else instance.get("link_type", ""),
    }
    if instance.get("orderby_random"):
        atts["orderby"] = "rand"
    return get_embed_handler("gallery")(atts)


RENDERERS: dict[MediaKind, Renderer] = {
    MediaKind.IMAGE: render_image,
    MediaKind.AUDIO: render_audio,
    MediaKind.VIDEO: render_video,
    MediaKind.GALLERY: render_gallery,
}


def get_renderer(kind) -> Renderer:
    try:
        return RENDERERS[MediaKind(kind)]
    except (KeyError, ValueError):
        raise UnsupportedMediaKind(f"No renderer for media kind {kind!r}.") from None
