from wikisites.extensions import db
from .base import BaseModel


class Page(BaseModel):
    __tablename__ = "pages"

    site_id = db.Column(db.String(36), db.ForeignKey("sites.id"), nullable=False, index=True)

    title = db.Column(db.String(255), nullable=False)
    # Title of the mirrored wiki page; fixed at creation
    wiki_title = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), nullable=False, index=True)
    content = db.Column(db.Text, nullable=False, default="")

    is_published = db.Column(db.Boolean, default=True, nullable=False)
    is_protected = db.Column(db.Boolean, default=False, nullable=False)

    __table_args__ = (
        db.Index("ix_page_site_title", "site_id", "title"),
        db.Index("ix_page_site_published_created", "site_id", "is_published", "created_at"),
    )

    site = db.relationship("Site", back_populates="pages")
    revisions = db.relationship(
        "PageRevision",
        order_by="PageRevision.created_at.desc()",
        viewonly=True,
    )
    files = db.relationship(
        "PageFile",
        order_by="PageFile.created_at.desc()",
        viewonly=True,
    )
