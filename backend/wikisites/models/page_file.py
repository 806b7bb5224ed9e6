from wikisites.extensions import db
from .base import BaseModel

STORAGE_LOCAL = "local"
STORAGE_WIKI = "wiki"


class PageFile(BaseModel):
    __tablename__ = "page_files"

    page_id = db.Column(
        db.String(36),
        db.ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    uploader_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)

    filename = db.Column(db.String(255), nullable=False)
    original_name = db.Column(db.String(255), nullable=False)
    mime_type = db.Column(db.String(100), nullable=False)
    size = db.Column(db.Integer, nullable=False)

    # storage decides how ``path`` is read: a /uploads/... path or a wiki URL
    storage = db.Column(db.String(10), nullable=False)
    path = db.Column(db.String(1024), nullable=False)

    page = db.relationship("Page")
    uploader = db.relationship("User")
