from typing import List, Optional
from .common import CamelModel

class ProfileUpdateIn(CamelModel):
    display_name: str = ''
    bio: str = ''

class MutualFriendOut(CamelModel):
    id: int
    display_name: str

class ProfileOut(CamelModel):
    display_name: str
    bio: str
    picture: str
    # absent (not empty) when the viewer is the target or already a friend
    mutual_friends: Optional[List[MutualFriendOut]] = None
