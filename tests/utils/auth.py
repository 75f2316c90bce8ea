from jose import jwt

from hackathon_service.core.config import settings
from hackathon_service.schemas.token import TokenPayload


def get_user_authentication_headers(user_id: str = "user_test") -> dict[str, str]:
    """
    Generates a valid JWT token and authentication headers for a test user.
    """
    payload = TokenPayload(sub=user_id, exp=9999999999)  # High expiration for tests
    token = jwt.encode(
        payload.model_dump(exclude_none=True),
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    return {"Authorization": f"Bearer {token}"}
