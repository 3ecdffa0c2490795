import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from errors import NotFound
from models import Product


SORT_FIELDS = {
    "id": Product.id,
    "name": Product.name,
    "created_at": Product.created_at,
}
SORT_ORDERS = ("asc", "desc")


@dataclass
class ProductFilter:
    search: str = ""
    page: int = 1
    page_size: int = 10
    sort_field: str = "name"
    sort_order: str = "desc"


def create_product(
    db: Session,
    name: str,
    description: str,
    images: List[str],
    specs: Optional[str] = None,
) -> Product:
    product = Product(
        name=name,
        description=description,
        specs=specs,
        images=list(images),
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def get_product(db: Session, product_id: int) -> Optional[Product]:
    return db.query(Product).filter(Product.id == product_id).first()


def get_product_or_404(db: Session, product_id: int) -> Product:
    product = get_product(db, product_id)
    if not product:
        raise NotFound("Product not found")
    return product


def update_product_fields(db: Session, product: Product, **fields) -> Product:
    for field, value in fields.items():
        if field == "images":
            # new list so SQLAlchemy sees the JSON column as changed
            value = list(value)
        setattr(product, field, value)

    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def delete_product(db: Session, product: Product) -> None:
    db.delete(product)
    db.commit()


def list_products(db: Session, filters: ProductFilter) -> Tuple[List[Product], int]:
    """
    Returns (items, total_pages). total_pages is never below 1,
    so an empty result still reports one (empty) page.
    """
    page = max(filters.page, 1)
    page_size = max(filters.page_size, 1)

    query = db.query(Product)

    search = (filters.search or "").strip()
    if search:
        # case-insensitive substring match on the name
        query = query.filter(func.lower(Product.name).contains(search.lower(), autoescape=True))

    total = query.count()
    total_pages = max(math.ceil(total / page_size), 1)

    column = SORT_FIELDS.get(filters.sort_field, Product.name)
    ordering = column.asc() if filters.sort_order == "asc" else column.desc()

    items = (
        query
        .order_by(ordering, Product.id.asc())
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )

    return items, total_pages


def latest_products(db: Session, limit: int) -> List[Product]:
    return (
        db.query(Product)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(max(limit, 1))
        .all()
    )
