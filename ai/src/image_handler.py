import io
import logging

from PIL import Image, UnidentifiedImageError

from ai.src.errors import ImageRequiredError, InvalidImageError

DEFAULT_MIME_TYPE = "image/jpeg"

# --- Utility Functions ---

def detect_mime_type(image_bytes: bytes) -> str | None:
    """Opens the bytes with Pillow and returns the MIME type of the detected format."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            img.verify()
            return Image.MIME.get(img.format or "")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError) as e:
        logging.warning(f"Uploaded file is not a readable image: {e}")
        raise InvalidImageError() from e


def read_image_upload(file_storage, default_mime_type: str = DEFAULT_MIME_TYPE) -> tuple[bytes, str]:
    """
    Reads an uploaded image (werkzeug FileStorage) into bytes and its MIME type.

    A declared image type is trusted as is (Gemini accepts formats Pillow
    cannot open, e.g. HEIC). Otherwise the type detected by Pillow is used,
    falling back to default_mime_type.
    """
    if file_storage is None:
        raise ImageRequiredError()

    image_bytes = file_storage.read()
    if not image_bytes:
        raise ImageRequiredError()

    declared = (file_storage.mimetype or "").lower()
    if declared.startswith("image/"):
        mime_type = declared
    else:
        mime_type = detect_mime_type(image_bytes) or default_mime_type

    logging.info(f"Received image '{file_storage.filename}' ({len(image_bytes)} bytes, {mime_type})")
    return image_bytes, mime_type
