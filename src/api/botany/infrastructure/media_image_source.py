"""IImageSource adapter over the Media context's ImageService."""

from __future__ import annotations

from botany.domain.value_objects import RecognitionImage
from botany.ports.image_source import IImageSource
from media.application import ImageService
from media.domain.value_objects import ImageKey

_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png"}


class MediaImageSource(IImageSource):
    """Loads uploaded images for recognition."""

    def __init__(self, image_service: ImageService) -> None:
        self._image_service = image_service

    async def load(self, key: str) -> RecognitionImage | None:
        try:
            image_key = ImageKey.from_string(key)
        except ValueError:
            return None

        stored = await self._image_service.fetch(image_key)
        if stored is None:
            return None

        extension = _EXTENSIONS.get(stored.media_type, "bin")
        return RecognitionImage(
            content=stored.content,
            filename=f"{image_key}.{extension}",
            media_type=stored.media_type,
        )
