from fastapi import Depends, HTTPException, Request

from app.core.security import get_current_user
from app.models.user import User
from app.services.cooldown import AdmissionChain


def get_submit_admission(request: Request) -> AdmissionChain:
    return request.app.state.submit_admission


async def enforce_submit_cooldown(
    current_user: User = Depends(get_current_user),
    admission: AdmissionChain = Depends(get_submit_admission),
) -> User:
    """Let the request through only if the user's submit cooldown admits it."""
    decision = await admission.admit(str(current_user.id))
    if not decision.admitted:
        raise HTTPException(status_code=decision.status_code, detail=decision.message)
    return current_user
