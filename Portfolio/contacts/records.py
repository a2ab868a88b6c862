from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from django.utils import timezone

StoredId = Union[int, str]


@dataclass(frozen=True)
class ContactRecord:
    """One contact-form submission.

    ``id`` stays ``None`` until a storage backend assigns one.
    """

    name: str
    email: str
    message: str
    received_at: datetime = field(default_factory=timezone.now)
    id: Optional[StoredId] = None

    @classmethod
    def from_form(cls, data):
        return cls(
            name=data.get("name") or "",
            email=data.get("email") or "",
            message=data.get("message") or "",
        )

    def with_id(self, record_id):
        return ContactRecord(
            name=self.name,
            email=self.email,
            message=self.message,
            received_at=self.received_at,
            id=record_id,
        )

    def to_json(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "message": self.message,
            "receivedAt": self.received_at.isoformat(),
        }
