from .exceptions import ValidationError


def assert_upload(*, filename, mime_type, size, allowed_mime_types, max_bytes):
    if not filename:
        raise ValidationError("No file provided")

    if mime_type not in allowed_mime_types:
        raise ValidationError("Invalid file type. Only images are allowed.")

    if size <= 0:
        raise ValidationError("Uploaded file is empty")

    if size > max_bytes:
        raise ValidationError(
            f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB."
        )
