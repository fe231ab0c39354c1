"""Login endpoint.

Checks credentials only; no session or token is issued.
"""

from fastapi import APIRouter

from examdesk.core.auth import authenticate
from examdesk.web.schemas import LoginRequest, LoginResponse, UserResponse

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(credentials: LoginRequest) -> LoginResponse:
    """Return the user whose email and password match."""
    user = authenticate(credentials.email, credentials.password)
    return LoginResponse(user=UserResponse.model_validate(user))
