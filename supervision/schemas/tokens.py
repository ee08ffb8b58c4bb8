# supervision/schemas/tokens.py
from pydantic import BaseModel
from typing import List, Any, Dict


class Token(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str
    roles: List[str]
    user: Dict[str, Any]


class AccessToken(BaseModel):
    access_token: str
    token_type: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class MessageOut(BaseModel):
    message: str
