from __future__ import annotations

from .models import Attachment


def make_attachment(**kwargs) -> Attachment:
    defaults = {
        "file": "uploads/2024/05/sunset.jpg",
        "title": "Sunset",
        "mime_type": "image/jpeg",
        "width": 1600,
        "height": 1200,
    }
    defaults.update(kwargs)
    return Attachment.objects.create(**defaults)


def make_audio(**kwargs) -> Attachment:
    defaults = {"file": "uploads/2024/05/episode.mp3", "title": "Episode 1", "mime_type": "audio/mpeg"}
    defaults.update(kwargs)
    return make_attachment(**defaults)


def make_video(**kwargs) -> Attachment:
    defaults = {
        "file": "uploads/2024/05/clip.mp4",
        "title": "Clip",
        "mime_type": "video/mp4",
        "width": 1280,
        "height": 720,
    }
    defaults.update(kwargs)
    return make_attachment(**defaults)


class DeferredFetcher:
    """Holds attachment fetches until the test resolves them."""

    def __init__(self):
        self.pending: list[tuple] = []

    def fetch(self, attachment_id, callback):
        self.pending.append(("one", attachment_id, callback))

    def fetch_many(self, attachment_ids, callback):
        self.pending.append(("many", list(attachment_ids), callback))

    def resolve(self, index: int = -1, result=None) -> None:
        _kind, _reference, callback = self.pending.pop(index)
        callback(result)


class RecordingPicker:
    def __init__(self):
        self.requests = []
        self.on_event = None

    def open(self, request, on_event):
        self.requests.append(request)
        self.on_event = on_event

    def emit(self, event) -> None:
        self.on_event(event)
