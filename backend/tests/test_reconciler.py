import pytest

import repository
from conftest import CDN
from errors import NotFound, UpstreamError, ValidationError
from reconciler import ProductImageReconciler

A = f"{CDN}/a.jpg"
B = f"{CDN}/b.jpg"


@pytest.fixture
def reconciler(db, image_store):
    return ProductImageReconciler(db, image_store)


def _update(reconciler, product_id, keep, payloads, **fields):
    fields.setdefault("name", "CCTV Camera")
    fields.setdefault("description", "Night vision")
    return reconciler.reconcile_update(product_id, keep, payloads, **fields)


def test_keep_one_add_one(db, reconciler, image_store, make_product):
    product = make_product(images=[A, B])

    updated = _update(reconciler, product.id, [A], ["data:image/png;base64,AAAA"])

    new_url = image_store.uploaded[0]
    assert updated.images == [A, new_url]
    assert image_store.deleted == ["products/b"]


def test_result_is_kept_then_uploaded_in_order(db, reconciler, image_store, make_product):
    product = make_product(images=[A, B])

    updated = _update(reconciler, product.id, [B, A], ["one", "two", "three"])

    assert updated.images == [B, A] + image_store.uploaded
    assert image_store.uploaded == [f"{CDN}/new1.jpg", f"{CDN}/new2.jpg", f"{CDN}/new3.jpg"]
    assert image_store.deleted == []


def test_nothing_left_is_rejected_without_remote_calls(db, reconciler, image_store, make_product):
    product = make_product(images=[A, B])

    with pytest.raises(ValidationError, match="at least one image"):
        _update(reconciler, product.id, [], [])

    assert image_store.calls == 0
    db.expire_all()
    assert repository.get_product(db, product.id).images == [A, B]


def test_blank_payloads_do_not_count(db, reconciler, image_store, make_product):
    product = make_product(images=[A])

    with pytest.raises(ValidationError):
        _update(reconciler, product.id, [], ["", "   ", None, b""])

    assert image_store.calls == 0


def test_missing_name_is_checked_first(reconciler, image_store):
    # product 404 is not even looked up
    with pytest.raises(ValidationError, match="Missing required fields"):
        _update(reconciler, 12345, [A], [], name="  ")

    assert image_store.calls == 0


def test_unknown_product(reconciler):
    with pytest.raises(NotFound):
        _update(reconciler, 12345, [A], ["x"])


def test_unknown_keep_urls_are_ignored(db, reconciler, image_store, make_product):
    product = make_product(images=[A])

    updated = _update(reconciler, product.id, [A, A, "https://elsewhere.com/c.jpg"], [])

    assert updated.images == [A]


def test_underivable_url_is_skipped(db, reconciler, image_store, make_product):
    product = make_product(images=[A, "https://cdn.example.com/", B])

    updated = _update(reconciler, product.id, [], ["new"])

    assert updated.images == image_store.uploaded
    assert image_store.deleted == ["products/a", "products/b"]


def test_failed_remote_delete_does_not_abort(db, reconciler, image_store, make_product):
    product = make_product(images=[A, B])
    image_store.fail_deletes.add("products/a")

    updated = _update(reconciler, product.id, [], ["new"])

    assert image_store.deleted == ["products/a", "products/b"]
    assert updated.images == image_store.uploaded


def test_upload_failure_compensates_and_keeps_record(db, reconciler, image_store, make_product):
    product = make_product(images=[A, B])
    image_store.fail_uploads.add("bad")

    with pytest.raises(UpstreamError):
        _update(reconciler, product.id, [A], ["good", "bad", "never"], name="Changed")

    # the upload done before the failure is removed again, B is untouched
    assert image_store.uploaded == [f"{CDN}/new1.jpg"]
    assert image_store.deleted == ["products/new1"]

    db.expire_all()
    fresh = repository.get_product(db, product.id)
    assert fresh.images == [A, B]
    assert fresh.name == "CCTV Camera"


def test_fields_are_updated(db, reconciler, make_product):
    product = make_product(images=[A])

    updated = _update(
        reconciler, product.id, [A], [], name=" PTZ Camera ", description="Zoom", specs="4K\n30x"
    )

    assert (updated.name, updated.description, updated.specs) == ("PTZ Camera", "Zoom", "4K\n30x")


def test_delete_removes_remote_then_record(db, reconciler, image_store, make_product):
    product = make_product(images=[A, B])
    image_store.fail_deletes.update({"products/a", "products/b"})

    reconciler.reconcile_delete(product.id)

    assert image_store.deleted == ["products/a", "products/b"]
    db.expire_all()
    assert repository.get_product(db, product.id) is None


def test_delete_unknown_product(reconciler, image_store):
    with pytest.raises(NotFound):
        reconciler.reconcile_delete(404)
    assert image_store.calls == 0


def test_removed_version_of_kept_asset_is_not_deleted(db, reconciler, image_store, make_product):
    kept = "https://res.cloudinary.com/demo/image/upload/v2/products/a.jpg"
    old = "https://res.cloudinary.com/demo/image/upload/v1/products/a.jpg"
    product = make_product(images=[kept, old, B])

    updated = _update(reconciler, product.id, [kept], [])

    assert updated.images == [kept]
    # products/a still backs the kept URL, only b goes
    assert image_store.deleted == ["products/b"]


def test_delete_remote_without_keep_deletes_everything(reconciler, image_store):
    reconciler.delete_remote([A, B])

    assert image_store.deleted == ["products/a", "products/b"]
