"""
Image storage for post attachments.

Uploaded files are written to UPLOAD_FOLDER under a random prefix and are
referenced from Post.image_url as "images/<filename>". Deletion is
best-effort: failures are logged and never raised to the caller.
"""
import logging
import os
import uuid

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

log = logging.getLogger(__name__)

URL_PREFIX = "images/"


class ImageStore:
    def __init__(self, folder: str, allowed_extensions=None):
        self.folder = folder
        self.allowed_extensions = {e.lower() for e in (allowed_extensions or ())}
        os.makedirs(self.folder, exist_ok=True)

    def is_allowed(self, upload: FileStorage | None) -> bool:
        """True if upload is a non-empty file with a permitted extension."""
        if upload is None or not upload.filename:
            return False
        _, ext = os.path.splitext(upload.filename)
        ext = ext.lstrip(".").lower()
        if not self.allowed_extensions:
            return bool(ext)
        return ext in self.allowed_extensions

    def save(self, upload: FileStorage) -> str:
        """Persist upload and return its image_url."""
        name = secure_filename(upload.filename) or "image"
        filename = f"{uuid.uuid4().hex}-{name}"
        upload.save(os.path.join(self.folder, filename))
        return URL_PREFIX + filename

    def path_for(self, image_url: str) -> str | None:
        """Map an image_url back to a file inside the store, or None if it points elsewhere."""
        if not image_url or not image_url.startswith(URL_PREFIX):
            return None
        filename = secure_filename(image_url[len(URL_PREFIX):])
        if not filename:
            return None
        return os.path.join(self.folder, filename)

    def delete(self, image_url: str) -> bool:
        """Remove the file behind image_url. Returns False (and logs) on any failure."""
        path = self.path_for(image_url)
        if path is None:
            log.warning("Not deleting image outside the store: %r", image_url)
            return False
        try:
            os.remove(path)
        except OSError as exc:
            log.warning("Could not delete image %s: %s", image_url, exc)
            return False
        return True
