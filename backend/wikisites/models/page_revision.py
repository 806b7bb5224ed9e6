from sqlalchemy import event
from wikisites.extensions import db
from .base import BaseModel


class PageRevision(BaseModel):
    __tablename__ = "page_revisions"

    page_id = db.Column(
        db.String(36),
        db.ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False)

    content = db.Column(db.Text, nullable=False)
    comment = db.Column(db.String(500), nullable=True)
    is_minor = db.Column(db.Boolean, default=False, nullable=False)

    __table_args__ = (
        db.Index("ix_revision_page_created", "page_id", "created_at", "id"),
    )

    page = db.relationship("Page")
    user = db.relationship("User")


@event.listens_for(PageRevision, "before_update")
@event.listens_for(PageRevision, "before_delete")
def prevent_revision_mutation(mapper, connection, target):
    raise RuntimeError("Page revisions are immutable")
