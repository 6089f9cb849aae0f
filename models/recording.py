"""Recording model definition."""

import uuid

from . import db, utcnow


recording_tags = db.Table(
    "recording_tags",
    db.Column("recording_id", db.String(36), db.ForeignKey("recordings.id", ondelete="CASCADE"), primary_key=True),
    db.Column("tag_id", db.String(36), db.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Recording(db.Model):
    """Represents an uploaded audio recording and its catalogue metadata."""

    __tablename__ = "recordings"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    file_url = db.Column(db.String(1024), nullable=False)
    file_key = db.Column(db.String(512), nullable=False)
    # "metadata" is reserved on declarative models.
    extra_metadata = db.Column("metadata", db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    tags = db.relationship(
        "Tag",
        secondary=recording_tags,
        backref="recordings",
        order_by="Tag.name",
    )

    def __repr__(self) -> str:
        return f"<Recording id={self.id} title={self.title!r}>"

    def to_dict(self, include_tags: bool = False) -> dict:
        """Serialize the recording into a dictionary."""

        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "file_url": self.file_url,
            "file_key": self.file_key,
            "metadata": self.extra_metadata,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_tags:
            data["tags"] = [tag.to_dict() for tag in self.tags]
        return data
