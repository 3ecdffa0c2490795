"""
Keeps a product's image list and the remote image host in step.

Update order:
  1. validate fields and the resulting image count (no remote calls yet)
  2. upload new payloads; on failure delete what this attempt uploaded
  3. delete removed images (best effort, failures are only logged)
  4. persist fields + final image list in one commit

Concurrent updates of the same product are not coordinated, the last
commit wins.
"""
import logging
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

import repository
from errors import UpstreamError, ValidationError
from image_store import CloudinaryImageStore, ImagePayload
from models import Product

logger = logging.getLogger(__name__)


def _is_blank(payload) -> bool:
    if payload is None:
        return True
    if isinstance(payload, (bytes, bytearray)):
        return len(payload) == 0
    if isinstance(payload, str):
        return not payload.strip()
    return True


def _require_text(value: Optional[str], message: str) -> str:
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ValidationError(message)
    return text


class ProductImageReconciler:
    def __init__(self, db: Session, image_store: CloudinaryImageStore):
        self.db = db
        self.image_store = image_store

    def delete_remote(self, urls: Iterable[str], keep: Iterable[str] = ()) -> None:
        """
        Best-effort removal of hosted images; never raises. Public ids that
        one of the `keep` URLs also resolves to are left alone.
        """
        protected = {self.image_store.url_to_public_id(url) for url in keep}
        protected.discard(None)

        for url in urls:
            public_id = self.image_store.url_to_public_id(url)
            if not public_id:
                logger.warning("No public id derivable from %r, skipping delete", url)
                continue
            if public_id in protected:
                logger.info("Skipping delete of %s, still used by a kept image", public_id)
                continue
            try:
                self.image_store.delete(public_id)
            except Exception as exc:
                logger.warning("Remote delete of %s failed: %s", public_id, exc)

    def upload_all(self, payloads: Sequence[ImagePayload]) -> List[str]:
        """
        Upload in submission order. If one upload fails, the ones already
        done in this call are deleted again and the error is re-raised.
        """
        uploaded: List[str] = []
        for index, payload in enumerate(payloads):
            try:
                uploaded.append(self.image_store.upload(payload))
            except Exception as exc:
                logger.error("Upload %d of %d failed: %s", index + 1, len(payloads), exc)
                if uploaded:
                    self.delete_remote(uploaded)
                if isinstance(exc, UpstreamError):
                    raise
                raise UpstreamError(f"Image upload failed: {exc}") from exc
        return uploaded

    def reconcile_update(
        self,
        product_id: int,
        keep_urls: Optional[Sequence[str]],
        new_payloads: Optional[Sequence[ImagePayload]],
        name: Optional[str],
        description: Optional[str],
        specs: Optional[str] = None,
    ) -> Product:
        name = _require_text(name, "Missing required fields")
        description = _require_text(description, "Missing required fields")

        product = repository.get_product_or_404(self.db, product_id)
        current = list(product.images or [])

        kept: List[str] = []
        for url in keep_urls or []:
            if url in current and url not in kept:
                kept.append(url)
            elif url not in current:
                logger.warning("Product %s: ignoring unknown image %r", product_id, url)

        payloads = [p for p in (new_payloads or []) if not _is_blank(p)]

        if not kept and not payloads:
            raise ValidationError("Product must have at least one image")

        to_delete = [url for url in current if url not in kept]

        uploaded = self.upload_all(payloads)
        self.delete_remote(to_delete, keep=kept)

        final_images = kept + uploaded
        logger.info(
            "Product %s images: kept=%d removed=%d uploaded=%d",
            product_id, len(kept), len(to_delete), len(uploaded),
        )

        fields = {"name": name, "description": description, "images": final_images}
        if specs is not None:
            # omitted specs stay as they are
            fields["specs"] = specs

        return repository.update_product_fields(self.db, product, **fields)

    def reconcile_delete(self, product_id: int) -> None:
        product = repository.get_product_or_404(self.db, product_id)

        # remote first, the row goes away whatever the host answered
        self.delete_remote(list(product.images or []))
        repository.delete_product(self.db, product)
        logger.info("Product %s deleted", product_id)
