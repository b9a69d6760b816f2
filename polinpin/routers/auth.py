from typing import Optional
from fastapi import APIRouter, Depends, Request, Response

from polinpin.core.errors import UnauthenticatedError
from polinpin.models.user import LoginRequest, RegisterRequest, UserInfo, UserSession

router = APIRouter(tags=["auth"])


def get_token(request: Request) -> Optional[str]:
    """Token from the Authorization header, with or without the Bearer prefix."""
    header = request.headers.get("Authorization", "").strip()
    if not header:
        return None
    scheme, _, value = header.partition(" ")
    if value and scheme.lower() == "bearer":
        return value.strip() or None
    return header


def require_token(token: Optional[str] = Depends(get_token)) -> str:
    if not token:
        raise UnauthenticatedError("Missing session token")
    return token


@router.post("/login", response_model=UserSession)
def login(request: Request, body: LoginRequest):
    auth_service = request.app.state.auth_service
    return auth_service.login(body.username, body.password)


@router.post("/register", response_model=UserSession)
def register(request: Request, body: RegisterRequest):
    auth_service = request.app.state.auth_service
    return auth_service.register(body.name, body.username, body.password)


@router.get("/me", response_model=UserInfo)
async def me(request: Request, token: str = Depends(require_token)):
    return request.app.state.auth_service.identify(token)


@router.post("/logout")
async def logout(request: Request, token: str = Depends(require_token)):
    request.app.state.auth_service.logout(token)
    return Response(status_code=200)
