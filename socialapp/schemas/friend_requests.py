from .common import CamelModel

class FriendRequestOut(CamelModel):
    id: int
    display_name: str
    picture: str
