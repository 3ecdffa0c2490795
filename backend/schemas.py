from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, computed_field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # JSON uses camelCase (totalPages, existingImages, createdAt)
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ProductOut(CamelModel):
    id: int
    name: str
    description: str
    specs: Optional[str] = None
    images: List[str] = []
    created_at: Optional[datetime] = None

    @computed_field(alias="specsList")
    @property
    def specs_list(self) -> List[str]:
        if not self.specs:
            return []
        return [line.strip() for line in self.specs.split("\n") if line.strip()]


class ProductListResponse(CamelModel):
    products: List[ProductOut]
    total_pages: int


# Request bodies are loose on purpose: missing or wrongly typed fields
# are reported by the routers as 400 {"error": ...}.

class ProductCreate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    specs: Optional[str] = None
    images: Optional[List[Any]] = None


class ProductUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    specs: Optional[str] = None
    existing_images: Optional[List[Any]] = None
    files: Optional[List[Any]] = None


class WhatsAppLinkOut(CamelModel):
    whatsapp_number: str
    link: str


class SettingIn(BaseModel):
    key: Optional[Any] = None
    value: Optional[Any] = None


class SettingOut(CamelModel):
    id: int
    key: str
    value: str
    created_at: Optional[datetime] = None


class UploadIn(BaseModel):
    files: Optional[Any] = None


class UploadOut(BaseModel):
    urls: List[str]


class ContactOut(BaseModel):
    email: str
    phone: str
    address: str
