"""
In-app notifications

scope is the recipient's role; admin notifications have no recipient_id
and form the global admin list.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean
from sqlalchemy.dialects.sqlite import JSON

from freight.db.base import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    scope = Column(String(20), nullable=False, index=True, comment="trader/driver/transport_company/admin")
    recipient_id = Column(String(32), index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    # view name, order id, request id
    data = Column(JSON)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f"<Notification {self.scope}/{self.recipient_id}: {self.title}>"
