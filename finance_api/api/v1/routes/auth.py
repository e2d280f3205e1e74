# finance_api/api/v1/routes/auth.py
from fastapi import APIRouter, Response, status

router = APIRouter(prefix="/auth", tags=["Authentication"])

# Registered before the fastapi-users JWT router so it takes this path
@router.post("/jwt/logout", status_code=status.HTTP_200_OK)
async def logout(response: Response):
    """
    Logout endpoint that doesn't require authentication.
    Bearer tokens are stateless; this only clears the access token cookie if present.
    """
    response.delete_cookie(key="access_token")
    return {"detail": "Successfully logged out"}
