"""
Pydantic схемы аутентификации.
"""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Схема для входа в систему."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    username: str = Field(..., min_length=1, description="Имя пользователя")
    password: str = Field(..., min_length=1, description="Пароль")


class LoginResponse(BaseModel):
    """Схема ответа при входе в систему."""

    id: int
    username: str
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class VerifyResponse(BaseModel):
    id: int
    username: str
    valid: bool = True
