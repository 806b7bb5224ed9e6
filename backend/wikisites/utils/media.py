import os
import uuid
from werkzeug.utils import secure_filename

MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/svg+xml": "svg",
}


def file_extension(filename, mime_type):
    name = secure_filename(filename or "")
    if "." in name:
        return name.rsplit(".", 1)[1].lower()
    return MIME_EXTENSIONS.get(mime_type, "bin")


def wiki_filename(page_id, filename, mime_type):
    """
    Name under which an upload is stored on the wiki: <page_id>-<uuid>.<ext>.

    Wiki file names are shared by every page of a wiki, so two uploads of
    "logo.png" must not land on the same name.
    """
    return f"{page_id}-{uuid.uuid4().hex}.{file_extension(filename, mime_type)}"


def save_local_file(data, *, upload_folder, site_id, page_id, filename, mime_type):
    """
    Writes bytes under <upload_folder>/<site_id>/<page_id>/<uuid>.<ext>.

    Returns (stored_filename, public_path, absolute_path).
    """
    unique_filename = f"{uuid.uuid4().hex}.{file_extension(filename, mime_type)}"

    directory = os.path.join(upload_folder, site_id, page_id)
    os.makedirs(directory, exist_ok=True)
    absolute_path = os.path.join(directory, unique_filename)

    with open(absolute_path, "wb") as fh:
        fh.write(data)

    public_path = f"/uploads/{site_id}/{page_id}/{unique_filename}"
    return unique_filename, public_path, absolute_path


def local_path_for(public_path, upload_folder):
    """
    Converts a /uploads/... path back to its location on disk.
    """
    relative = public_path.lstrip("/")
    if relative.startswith("uploads/"):
        relative = relative[len("uploads/"):]
    return os.path.join(upload_folder, relative)


def delete_file(path, logger=None):
    if not path or not os.path.exists(path):
        return False

    try:
        os.remove(path)
        return True
    except OSError as e:
        if logger is not None:
            logger.error(f"Failed to delete file {path}: {e}")
        return False
