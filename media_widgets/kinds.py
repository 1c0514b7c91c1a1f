from enum import Enum


class MediaKind(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"
    VIDEO = "video"
    GALLERY = "gallery"

    @property
    def mime_type(self) -> str:
        # Galleries are made of images.
        return "image" if self is MediaKind.GALLERY else self.value


AUDIO_EXTENSIONS = ("mp3", "ogg", "m4a", "wav")
VIDEO_EXTENSIONS = ("mp4", "m4v", "webm", "ogv", "flv")
