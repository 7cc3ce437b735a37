# masterxp/models.py
import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import validates

from .extensions import db
from .leveling import level_for_xp


def _utcnow():
    return datetime.now(timezone.utc)


def _new_task_id():
    return str(uuid.uuid4())


class Account(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    subject_id = db.Column(db.String(255), unique=True, nullable=False, index=True)
    xp = db.Column(db.BigInteger, default=0, nullable=False)
    level = db.Column(db.BigInteger, default=1, nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    @validates("xp")
    def _sync_level(self, key, value):
        # level is derived; keep the stored copy in step with every xp write
        self.level = level_for_xp(value)
        return value

    def to_dict(self):
        return {
            "subject_id": self.subject_id,
            "xp": int(self.xp or 0),
            "level": int(self.level or 1),
        }

    def __repr__(self):
        return f"<Account {self.subject_id} xp={self.xp} lvl={self.level}>"


class Task(db.Model):
    __tablename__ = "todos"

    id = db.Column(db.String(36), primary_key=True, default=_new_task_id)
    subject_id = db.Column(
        db.String(255),
        db.ForeignKey("users.subject_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    text = db.Column(db.String(500), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    completed = db.Column(db.Boolean, default=False, nullable=False)
    xp_awarded = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "text": self.text,
            "date": self.date.isoformat() if self.date else None,
            "completed": bool(self.completed),
            "xp_awarded": bool(self.xp_awarded),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<Task {self.id} {self.text!r} by {self.subject_id} completed={self.completed}>"
