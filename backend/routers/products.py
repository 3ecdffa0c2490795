import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

import config
import repository
from database import get_db
from deps_auth import get_current_admin, get_optional_admin
from errors import Unauthorized, ValidationError
from image_store import CloudinaryImageStore, get_image_store
from models import Admin
from reconciler import ProductImageReconciler
from repository import ProductFilter
from schemas import (
    ProductCreate,
    ProductListResponse,
    ProductOut,
    ProductUpdate,
    WhatsAppLinkOut,
)
from settings_store import get_setting_value

logger = logging.getLogger(__name__)

products_router = APIRouter(prefix="/products", tags=["products"])


def get_reconciler(
    db: Session = Depends(get_db),
    image_store: CloudinaryImageStore = Depends(get_image_store),
) -> ProductImageReconciler:
    return ProductImageReconciler(db, image_store)


def _check_product_id(product_id: int) -> int:
    if product_id < 1:
        raise ValidationError("Invalid product ID")
    return product_id


def _clamp_limit(limit: Optional[int], default: int, maximum: int) -> int:
    if not limit or limit < 1:
        return default
    return min(limit, maximum)


# ======================
#   LIST
# ======================

@products_router.get("", response_model=ProductListResponse)
def list_products(
    search: str = "",
    page: int = 1,
    limit: Optional[int] = None,
    sort: str = "desc",
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    admin: str = "",
    db: Session = Depends(get_db),
    current_admin: Optional[Admin] = Depends(get_optional_admin),
):
    sort_order = sort if sort in repository.SORT_ORDERS else "desc"
    if sort_by is not None and sort_by not in repository.SORT_FIELDS:
        raise ValidationError("Invalid sort field")

    # only the literal "true" asks for the admin view
    if admin == "true":
        if current_admin is None:
            raise Unauthorized("Unauthorized: Admins only")
        filters = ProductFilter(
            search=search,
            page=page,
            page_size=_clamp_limit(limit, config.ADMIN_DEFAULT_LIMIT, config.ADMIN_MAX_LIMIT),
            sort_field=sort_by or "created_at",
            sort_order=sort_order if sort_by else "desc",
        )
    else:
        filters = ProductFilter(
            search=search,
            page=page,
            page_size=_clamp_limit(limit, config.PUBLIC_DEFAULT_LIMIT, config.PUBLIC_MAX_LIMIT),
            sort_field=sort_by or "name",
            sort_order=sort_order,
        )

    items, total_pages = repository.list_products(db, filters)
    return {"products": items, "total_pages": total_pages}


@products_router.get("/latest", response_model=list[ProductOut])
def latest_products(
    limit: Optional[int] = None,
    db: Session = Depends(get_db),
):
    return repository.latest_products(
        db, _clamp_limit(limit, config.LATEST_DEFAULT_LIMIT, config.PUBLIC_MAX_LIMIT)
    )


# ======================
#   DETAIL
# ======================

@products_router.get("/{product_id}", response_model=ProductOut)
def get_product_detail(
    product_id: int,
    db: Session = Depends(get_db),
):
    return repository.get_product_or_404(db, _check_product_id(product_id))


@products_router.get("/{product_id}/whatsapp", response_model=WhatsAppLinkOut)
def get_whatsapp_link(
    product_id: int,
    db: Session = Depends(get_db),
):
    """Pre-filled WhatsApp enquiry for one product; empty link when no number is set."""
    product = repository.get_product_or_404(db, _check_product_id(product_id))
    number = get_setting_value(db, config.WHATSAPP_SETTING_KEY).strip()

    link = ""
    if number:
        product_url = f"{config.SITE_URL}/products/{product.id}"
        text = f'Hi, I am interested in the product "{product.name}". Check it here: {product_url}'
        link = f"https://wa.me/{quote(number, safe='')}?text={quote(text, safe='')}"

    return {"whatsapp_number": number, "link": link}


# ======================
#   ADMIN: CREATE / UPDATE / DELETE
# ======================

@products_router.post("", response_model=ProductOut)
def create_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    current_admin: Admin = Depends(get_current_admin),
):
    name = (payload.name or "").strip()
    description = (payload.description or "").strip()
    if not name or not description or not payload.images:
        raise ValidationError("Missing required fields or images")

    images = [img.strip() for img in payload.images if isinstance(img, str) and img.strip()]
    if not images:
        raise ValidationError("No valid images provided")

    product = repository.create_product(
        db,
        name=name,
        description=description,
        specs=payload.specs,
        images=images,
    )
    logger.info("Admin %s created product %s", current_admin.email, product.id)
    return product


@products_router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    reconciler: ProductImageReconciler = Depends(get_reconciler),
    current_admin: Admin = Depends(get_current_admin),
):
    keep_urls = [url for url in (payload.existing_images or []) if isinstance(url, str)]

    return reconciler.reconcile_update(
        _check_product_id(product_id),
        keep_urls=keep_urls,
        new_payloads=payload.files or [],
        name=payload.name,
        description=payload.description,
        specs=payload.specs,
    )


@products_router.delete("/{product_id}")
def delete_product(
    product_id: int,
    reconciler: ProductImageReconciler = Depends(get_reconciler),
    current_admin: Admin = Depends(get_current_admin),
):
    reconciler.reconcile_delete(_check_product_id(product_id))
    return {"message": "Product deleted successfully"}
