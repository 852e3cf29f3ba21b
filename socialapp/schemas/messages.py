from datetime import datetime
from typing import Optional
from .common import CamelModel

class MessageOut(CamelModel):
    id: int
    content: str
    type: str
    me: bool
    date_sent: datetime
    picture: Optional[str] = None

class LatestMessageOut(CamelModel):
    id: int
    content: str
    type: str
    me: bool
    date_sent: datetime

class ConversationOut(CamelModel):
    id: int
    display_name: str
    picture: str
    message: LatestMessageOut
