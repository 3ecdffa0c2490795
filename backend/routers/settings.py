from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from deps_auth import get_current_admin
from models import Admin
from schemas import SettingIn, SettingOut
from settings_store import list_settings, upsert_setting

settings_router = APIRouter(prefix="/admin/settings", tags=["settings"])


# public read: the storefront needs the WhatsApp number
@settings_router.get("", response_model=list[SettingOut])
def get_settings(db: Session = Depends(get_db)):
    return list_settings(db)


@settings_router.put("", response_model=SettingOut)
def put_setting(
    payload: SettingIn,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    return upsert_setting(db, payload.key, payload.value)
