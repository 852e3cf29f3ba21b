import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, ForeignKey
from sqlalchemy.orm import validates
from . import Base


class MessageType(str, enum.Enum):
    TEXT = 'TEXT'
    IMAGE = 'IMAGE'
    DELETED = 'DELETED'


def utcnow():
    return datetime.now(timezone.utc)


class Message(Base):
    __tablename__ = 'messages'
    id = Column(Integer, primary_key=True)
    from_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False)
    to_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), index=True, nullable=False)
    # text body, or the image URL for IMAGE messages
    content = Column(Text, nullable=False, default='')
    type = Column(Enum(MessageType, name='message_type'), nullable=False)
    # image store key of an IMAGE message's attachment
    image_key = Column(String(255), nullable=True)
    date_sent = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    @validates('type')
    def validate_type(self, key, value):
        if self.type == MessageType.DELETED and value != MessageType.DELETED:
            raise ValueError('A deleted message cannot be restored')
        return value
