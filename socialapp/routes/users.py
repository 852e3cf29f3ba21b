from fastapi import APIRouter, HTTPException, Form
from ..schemas.users import RegisterIn, TokenOut, UserOut
from ..services import accounts

router = APIRouter()


@router.post('/register', response_model=UserOut)
async def register(payload: RegisterIn):
    return await accounts.register(payload.username, payload.password, payload.display_name)


@router.post('/login', response_model=TokenOut)
async def login(
    username: str = Form(...),
    password: str = Form(...)
):
    token = await accounts.login(username, password)
    if not token:
        raise HTTPException(status_code=401, detail='Invalid credentials')
    return token
