from fastapi import APIRouter

import config
from schemas import ContactOut

site_router = APIRouter(prefix="/site", tags=["site"])


@site_router.get("/contact", response_model=ContactOut)
def contact_info():
    return {
        "email": config.CONTACT_EMAIL,
        "phone": config.CONTACT_PHONE,
        "address": config.CONTACT_ADDRESS,
    }
