from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from errors import ValidationError
from models import Setting


def get_setting(db: Session, key: str) -> Optional[Setting]:
    return db.query(Setting).filter(Setting.key == key).first()


def get_setting_value(db: Session, key: str, default: str = "") -> str:
    setting = get_setting(db, key)
    return setting.value if setting else default


def list_settings(db: Session) -> List[Setting]:
    return db.query(Setting).order_by(Setting.created_at.asc(), Setting.id.asc()).all()


def upsert_setting(db: Session, key, value) -> Setting:
    """Create the setting on first write, overwrite its value afterwards."""
    if not isinstance(key, str) or not key.strip() or not isinstance(value, str):
        raise ValidationError("Invalid key or value")

    key = key.strip()
    setting = get_setting(db, key)
    if setting:
        setting.value = value
    else:
        setting = Setting(key=key, value=value)
        db.add(setting)

    try:
        db.commit()
    except IntegrityError:
        # somebody inserted the same key in between, update theirs
        db.rollback()
        setting = get_setting(db, key)
        setting.value = value
        db.commit()

    db.refresh(setting)
    return setting
