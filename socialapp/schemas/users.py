from .common import CamelModel
from pydantic import BaseModel

class RegisterIn(CamelModel):
    username: str
    password: str
    display_name: str

class TokenOut(BaseModel):
    access_token: str
    token_type: str = 'bearer'

class UserOut(CamelModel):
    id: int
    username: str
