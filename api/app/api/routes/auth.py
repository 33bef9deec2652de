from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_profile_service
from app.schemas.auth import SignupOut, SignupRequest, SignupUserOut
from app.services.identity import IdentityRequestError, IdentityUnavailableError

router = APIRouter()


@router.post("/signup", response_model=SignupOut)
async def signup(payload: SignupRequest, profiles=Depends(get_profile_service)) -> SignupOut:
    try:
        user = await profiles.signup(email=payload.email, password=payload.password, name=payload.name)
    except IdentityRequestError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except IdentityUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return SignupOut(user=SignupUserOut(id=user.id, email=user.email))
