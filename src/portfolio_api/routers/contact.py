import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from portfolio_api.adapters.mailer import BaseMailer, ContactMessage
from portfolio_api.dependencies import get_mailer
from portfolio_api.schemas import ContactRequest, ContactResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/send",
    response_model=ContactResponse,
    response_model_exclude_none=True,
    responses={500: {"model": ContactResponse}},
)
async def send_contact_message(payload: ContactRequest, mailer: BaseMailer = Depends(get_mailer)):
    """
    Relay a contact-form submission to the site owner by email.

    Delivery is attempted once; any failure is answered with 500 and `success: false`.
    """
    contact = ContactMessage(
        name=payload.name,
        email=payload.email or "",
        subject=payload.subject,
        message=payload.message or "",
    )
    try:
        await mailer.send_contact(contact)
    except Exception as e:
        logger.error("Email error: %s", e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Email failed"},
        )
    return ContactResponse(success=True)
