# canteen/api/routers/auth.py
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from canteen.api.deps import TOKEN_COOKIE, get_current_user, get_db, get_settings
from canteen.domain.context import AuthContext
from canteen.domain.schemas import AuthOut, LoginIn, MeOut, MessageOut, RegisterIn
from canteen.services.auth_service import AuthService
from canteen.utils.settings import Settings

router = APIRouter(prefix="/api/auth", tags=["auth"])


def set_token_cookie(response: Response, token: str, settings: Settings):
    response.set_cookie(
        key=TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.jwt_expires_days * 24 * 60 * 60,
    )


@router.post("/register", response_model=AuthOut, status_code=201)
def register(
    payload: RegisterIn,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    result = AuthService(db, settings).register(payload)
    set_token_cookie(response, result["token"], settings)
    return result


@router.post("/login", response_model=AuthOut)
def login(
    payload: LoginIn,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    result = AuthService(db, settings).login(payload)
    set_token_cookie(response, result["token"], settings)
    return result


@router.get("/me", response_model=MeOut)
def me(ctx: AuthContext = Depends(get_current_user)):
    return {"user": ctx.user}


@router.post("/logout", response_model=MessageOut)
def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE, httponly=True)
    return {"message": "Logged out"}
