import base64
from io import BytesIO

import pytest
from PIL import Image

from veneer_inventory.core.errors import ValidationError
from veneer_inventory.services.image_service import image_service
from veneer_inventory.services.storage_service import LocalStorageProvider


def jpeg_bytes():
    buffer = BytesIO()
    Image.new("RGB", (8, 8), (210, 180, 140)).save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.mark.parametrize("value", [
    "https://cdn.example.com/veneer/teak.jpg",
    "http://example.com/a.png",
    "/static/products/abc/1/f.png",
    "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8\xff").decode(),
])
def test_accepted_image_references(value):
    image_service.validate_reference(value)


@pytest.mark.parametrize("value", [
    "ftp://example.com/a.jpg",
    "teak.jpg",
    "//evil.example/x.png",
    "/uploads/teak.jpg",
    "/static/",
    "https://",
    "data:image/svg+xml;base64,PHN2Zz4=",
    "data:image/png;base64,not base64!",
])
def test_rejected_image_references(value):
    with pytest.raises(ValueError):
        image_service.validate_reference(value)


def test_oversized_data_url_is_rejected(monkeypatch):
    from veneer_inventory.core.config import settings

    monkeypatch.setattr(settings, "MAX_IMAGE_SIZE", 10)
    value = "data:image/png;base64," + base64.b64encode(b"x" * 11).decode()
    with pytest.raises(ValueError):
        image_service.validate_reference(value)


def test_validate_upload_returns_mime_type():
    assert image_service.validate_upload("teak.JPG", jpeg_bytes()) == "image/jpeg"


@pytest.mark.parametrize("filename,data", [
    ("teak.jpg", b""),
    ("teak.txt", b"hello"),
    ("teak", b"hello"),
    ("teak.jpg", b"not really a jpeg"),
])
def test_validate_upload_rejects(filename, data):
    with pytest.raises(ValidationError) as excinfo:
        image_service.validate_upload(filename, data)
    assert excinfo.value.errors[0]["field"] == "file"


def test_generate_path_layout():
    path = image_service.generate_path(42, "Teak.PNG")
    prefix, bucket, product_id, name = path.split("/")
    assert prefix == "products"
    assert len(bucket) == 8
    assert product_id == "42"
    assert name.endswith(".png")
    assert image_service.generate_path(42, "Teak.PNG") != path


def test_local_storage_roundtrip(tmp_path):
    storage = LocalStorageProvider(str(tmp_path))
    assert storage.save_file("products/x/1/a.jpg", BytesIO(b"data"))
    assert storage.file_exists("products/x/1/a.jpg")
    assert (tmp_path / "products/x/1/a.jpg").read_bytes() == b"data"
    assert storage.get_file_url("products/x/1/a.jpg") == "/static/products/x/1/a.jpg"

    assert storage.delete_file("products/x/1/a.jpg")
    assert not storage.file_exists("products/x/1/a.jpg")
    assert not storage.delete_file("products/x/1/a.jpg")


def test_uploaded_image_is_served(api, teak):
    response = api.post(
        f"/api/v1/products/{teak['product']['id']}/image",
        files={"file": ("teak.jpg", jpeg_bytes(), "image/jpeg")},
    )
    image = response.json()["image"]
    served = api.get(image)
    assert served.status_code == 200
    assert served.content == jpeg_bytes()


def upload(api, product_id, data=None):
    response = api.post(
        f"/api/v1/products/{product_id}/image",
        files={"file": ("teak.jpg", data or jpeg_bytes(), "image/jpeg")},
    )
    assert response.status_code == 200, response.text
    return response.json()["image"]


def stored(image):
    from veneer_inventory.services.storage_service import storage_service

    return storage_service.file_exists(storage_service.path_from_url(image))


def test_protocol_relative_image_is_rejected_on_update(api, teak):
    product_id = teak["product"]["id"]
    response = api.put(f"/api/v1/products/{product_id}", json={"image": "//evil.example/x.png"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "image"
    assert api.get(f"/api/v1/products/{product_id}").json()["image"] == ""


def test_path_from_url(tmp_path):
    storage = LocalStorageProvider(str(tmp_path))
    assert storage.path_from_url("/static/products/ab/1/x.jpg") == "products/ab/1/x.jpg"
    assert storage.path_from_url("https://cdn.example.com/products/ab/1/x.jpg") is None
    assert storage.path_from_url("/static/../secret") is None
    assert storage.path_from_url("/static/products/../../secret") is None
    assert storage.path_from_url("") is None


def test_local_storage_refuses_paths_outside_base(tmp_path):
    base = tmp_path / "uploads"
    outside = tmp_path / "keep.txt"
    outside.write_text("keep")
    storage = LocalStorageProvider(str(base))
    assert not storage.delete_file("../keep.txt")
    assert outside.exists()


def test_replacing_uploaded_image_removes_old_file(api, teak):
    product_id = teak["product"]["id"]
    first = upload(api, product_id)
    second = upload(api, product_id)

    assert first != second
    assert not stored(first)
    assert stored(second)


def test_setting_external_image_removes_uploaded_file(api, teak):
    product_id = teak["product"]["id"]
    image = upload(api, product_id)

    response = api.put(
        f"/api/v1/products/{product_id}", json={"image": "https://cdn.example.com/teak.jpg"}
    )
    assert response.status_code == 200
    assert not stored(image)


def test_deleting_product_removes_its_file(api, teak):
    image = upload(api, teak["product"]["id"])
    api.delete(f"/api/v1/products/{teak['product']['id']}")
    assert not stored(image)


def test_cascade_delete_removes_files(api, teak):
    image = upload(api, teak["product"]["id"])
    api.delete(f"/api/v1/categories/{teak['category']['id']}")
    assert not stored(image)


def test_sub_category_delete_removes_files(api, teak):
    image = upload(api, teak["product"]["id"])
    api.delete(f"/api/v1/subcategories/{teak['sub_category']['id']}")
    assert not stored(image)


def test_file_shared_by_another_product_is_kept(api, teak):
    image = upload(api, teak["product"]["id"])
    other = api.post("/api/v1/products", json={
        "name": "TQ-002", "sub_category_id": teak["sub_category"]["id"],
        "qty": 1, "price": 1, "billing": 1, "image": image,
    }).json()

    api.delete(f"/api/v1/products/{teak['product']['id']}")
    assert stored(image)

    api.delete(f"/api/v1/products/{other['id']}")
    assert not stored(image)
