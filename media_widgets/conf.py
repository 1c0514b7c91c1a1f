from __future__ import annotations

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "IMAGE_SIZES": {
        "thumbnail": (150, 150, True),
        "medium": (300, 300, False),
        "medium_large": (768, 0, False),
        "large": (1024, 1024, False),
    },
    "EMBED_HANDLERS": {
        "audio": "media_widgets.embeds.audio_embed",
        "video": "media_widgets.embeds.video_embed",
        "gallery": "media_widgets.embeds.gallery_embed",
        "caption": "media_widgets.embeds.caption_embed",
    },
    "OEMBED_PROVIDERS": {
        "youtube.com": "https://www.youtube.com/oembed",
        "youtu.be": "https://www.youtube.com/oembed",
        "vimeo.com": "https://vimeo.com/api/oembed.json",
    },
    "OEMBED_TIMEOUT": 3,
}


def get_setting(name: str) -> Any:
    """Read one MEDIA_WIDGETS option, falling back to the built-in default."""
    configured = getattr(settings, "MEDIA_WIDGETS", None) or {}
    if name in configured:
        return configured[name]
    return DEFAULTS[name]


def image_size_names() -> list[str]:
    return list(get_setting("IMAGE_SIZES").keys())
