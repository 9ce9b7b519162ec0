from pydantic import BaseModel
from typing import Any, Dict


class AuthResponse(BaseModel):
    """
    Returned by signup, login and refresh.
    """
    user: Dict[str, Any]
    token: str
    refresh_token: str
    token_type: str = "bearer"
