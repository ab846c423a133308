"""Food photos kept as files in a local directory."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from uuid import uuid4

from diet_tracker.services.food_log import FoodImageStore
from diet_tracker.services.prompts import detect_mime_type

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


@dataclass
class LocalImageStore(FoodImageStore):
    """Writes each photo to its own uniquely named file."""

    directory: Path
    now: Callable[[], datetime] = field(default=datetime.now)

    @classmethod
    def create(cls, directory: str) -> "LocalImageStore":
        """Create a store for the given directory."""
        return cls(directory=Path(directory))

    def save(self, image_bytes: bytes) -> str:
        """Write the photo and return its path."""
        self.directory.mkdir(parents=True, exist_ok=True)
        extension = _EXTENSIONS.get(detect_mime_type(image_bytes), "jpg")
        stamp = self.now().strftime("%Y%m%d%H%M%S")
        path = self.directory / f"food_{stamp}_{uuid4().hex[:8]}.{extension}"
        path.write_bytes(image_bytes)
        return str(path)
