from wikisites.extensions import db
from .base import BaseModel


class Site(BaseModel):
    __tablename__ = "sites"

    name = db.Column(db.String(255), nullable=False)
    # Unique among active sites; enforced in application/sites
    subdomain = db.Column(db.String(63), nullable=False, index=True)
    domain = db.Column(db.String(255), nullable=True)
    wiki_url = db.Column(db.String(512), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    user_id = db.Column(db.String(36), db.ForeignKey("users.id"), nullable=False, index=True)

    owner = db.relationship("User", back_populates="sites")
    pages = db.relationship(
        "Page",
        back_populates="site",
        order_by="Page.created_at",
        cascade="all, delete-orphan",
    )

    def is_owned_by(self, user) -> bool:
        return user is not None and user.id == self.user_id
