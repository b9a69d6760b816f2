from pydantic import BaseModel


class User(BaseModel):
    name: str
    username: str
    # Hashed credential, never the plain password
    password: str


class SessionRecord(BaseModel):
    username: str
    token: str
    created_at: float


class LoginRequest(BaseModel):
    username: str
    password: str


class RegisterRequest(BaseModel):
    name: str
    username: str
    password: str


class UserSession(BaseModel):
    name: str
    token: str


class UserInfo(BaseModel):
    name: str
    username: str
