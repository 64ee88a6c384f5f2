from fastapi import APIRouter, Depends

from portfolio_api.dependencies import get_admin_gate
from portfolio_api.schemas import AdminVerifyRequest, AdminVerifyResponse
from portfolio_api.services.admin import AdminGate

router = APIRouter()


@router.post("/admin/verify", response_model=AdminVerifyResponse, response_model_exclude_none=True)
def verify_admin(payload: AdminVerifyRequest, gate: AdminGate = Depends(get_admin_gate)):
    """
    Check the admin password.

    Always answers 200; a mismatch is reported in the body.
    """
    if gate.verify(payload.password):
        return AdminVerifyResponse(success=True)
    return AdminVerifyResponse(success=False, error="Wrong password")
