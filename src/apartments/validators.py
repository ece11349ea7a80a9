from django.conf import settings
from django.core.exceptions import ValidationError
from PIL import Image, UnidentifiedImageError

BYTES_IN_MB = 1024 * 1024


def validate_image_file(uploaded_file):
    """
    Check an uploaded image against the APARTMENT_IMAGE_* settings:
    size in MB, that Pillow can open it, its format and its dimensions.
    Leaves the file at position 0.
    """
    max_mb = int(getattr(settings, "APARTMENT_IMAGE_MAX_MB", 5))
    if uploaded_file.size > max_mb * BYTES_IN_MB:
        raise ValidationError(f"File too large: max {max_mb} MB")

    try:
        uploaded_file.seek(0)
        img = Image.open(uploaded_file)
        img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValidationError("Only image files are allowed (jpeg, jpg, png, gif, webp)")

    # verify() leaves the image unusable, open it again for format/size
    uploaded_file.seek(0)
    img = Image.open(uploaded_file)

    fmt = (img.format or "").upper()
    if fmt == "JPG":
        fmt = "JPEG"

    allowed = set(getattr(settings, "APARTMENT_IMAGE_ALLOWED_FORMATS", {"JPEG", "PNG", "GIF", "WEBP"}))
    if fmt not in allowed:
        raise ValidationError(f"Unsupported format: {fmt}. Allowed: {', '.join(sorted(allowed))}")

    w, h = img.size
    max_w = int(getattr(settings, "APARTMENT_IMAGE_MAX_WIDTH", 6000))
    max_h = int(getattr(settings, "APARTMENT_IMAGE_MAX_HEIGHT", 6000))
    if w > max_w or h > max_h:
        raise ValidationError(f"Image too large: {w}x{h}px (max {max_w}x{max_h}px)")

    uploaded_file.seek(0)
