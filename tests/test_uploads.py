import os

import pytest

from conftest import JPEG_BYTES, FakeResponse, image_part, leftover_files
from image.models import UploadedFile
from image.uploads import (
    FILENAME_PREFIX,
    build_upload_filename,
    cleanup_uploaded_files,
    is_image_upload,
)


@pytest.mark.parametrize("name, mime, expected", [
    ("photo.jpg", "image/jpeg", True),
    ("photo.PNG", "application/octet-stream", True),
    ("scan.tiff", None, True),
    ("blob", "image/heic", True),
    (None, None, True),
    ("", "application/octet-stream", True),
    ("notes.txt", "text/plain", False),
    ("archive.zip", "application/zip", False),
])
def test_is_image_upload(name, mime, expected):
    assert is_image_upload(name, mime) is expected


def test_build_upload_filename_keeps_extension():
    name = build_upload_filename("holiday.png")
    assert name.startswith(f"{FILENAME_PREFIX}-")
    assert name.endswith(".png")


def test_build_upload_filename_defaults_to_jpg():
    assert build_upload_filename(None).endswith(".jpg")
    assert build_upload_filename("no_extension").endswith(".jpg")
    assert build_upload_filename("../../etc/passwd").endswith(".jpg")


def test_build_upload_filename_is_unique():
    names = {build_upload_filename("a.jpg") for _ in range(50)}
    assert len(names) == 50


def test_cleanup_tolerates_missing_files(tmp_path):
    present = tmp_path / "present.jpg"
    present.write_bytes(JPEG_BYTES)
    files = [
        UploadedFile(path=str(present), filename="present.jpg", size=len(JPEG_BYTES)),
        UploadedFile(path=str(tmp_path / "gone.jpg"), filename="gone.jpg"),
    ]

    assert cleanup_uploaded_files(files) == 1
    assert not present.exists()


def test_no_images_is_rejected(client, provider, upload_dir):
    response = client.post("/generate-image", data={"transformationType": "avatar"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "NoImagesUploaded"
    assert provider.post_calls == []


def test_too_many_files_is_rejected(client, provider, upload_dir):
    files = [image_part("a.jpg"), image_part("b.jpg"), image_part("c.jpg")]
    response = client.post("/generate-image", files=files)

    assert response.status_code == 400
    assert response.json()["code"] == "TooManyFiles"
    assert leftover_files(upload_dir) == []
    assert provider.post_calls == []


def test_oversized_file_is_rejected_and_siblings_removed(make_config, use_config, provider, upload_dir):
    from fastapi.testclient import TestClient
    from app import app

    use_config(make_config(max_file_size=1024))
    client = TestClient(app)
    files = [image_part("small.jpg", JPEG_BYTES), image_part("big.jpg", b"\x00" * 4096)]

    response = client.post("/generate-image", files=files)

    assert response.status_code == 413
    body = response.json()
    assert body["code"] == "FileTooLarge"
    assert "smaller than" in body["message"]
    assert leftover_files(upload_dir) == []
    assert provider.post_calls == []


def test_unexpected_field_is_rejected(client, provider, upload_dir):
    files = [("photo", ("a.jpg", JPEG_BYTES, "image/jpeg"))]
    response = client.post("/generate-image", files=files)

    assert response.status_code == 400
    assert response.json()["code"] == "UnexpectedUploadField"
    assert leftover_files(upload_dir) == []


def test_non_image_is_rejected(client, provider, upload_dir):
    files = [image_part("a.jpg"), image_part("notes.txt", b"hello", "text/plain")]
    response = client.post("/generate-image", files=files)

    assert response.status_code == 400
    assert response.json()["code"] == "InvalidFileType"
    assert leftover_files(upload_dir) == []


def test_upload_dir_is_recreated_per_request(client, provider, upload_dir):
    provider.post_responses = [FakeResponse(200, {"data": [{"url": "https://img.example/1.png"}]})]
    assert not os.path.exists(upload_dir)

    response = client.post("/generate-image", files=[image_part()])

    assert response.status_code == 200
    assert os.path.isdir(upload_dir)
    assert leftover_files(upload_dir) == []


def test_many_file_parts_are_rejected_as_too_many(client, provider, upload_dir):
    files = [image_part(f"{i}.jpg") for i in range(40)]
    response = client.post("/generate-image", files=files)

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "TooManyFiles"
    assert body["message"] == "Maximum 2 images allowed"
    assert leftover_files(upload_dir) == []
    assert provider.post_calls == []


def test_file_limit_follows_config(make_config, use_config, provider, upload_dir):
    from fastapi.testclient import TestClient
    from app import app

    use_config(make_config(max_files=1))
    response = TestClient(app).post("/generate-image", files=[image_part("a.jpg"), image_part("b.jpg")])

    assert response.status_code == 400
    assert response.json()["message"] == "Maximum 1 images allowed"
    assert leftover_files(upload_dir) == []


def test_unparseable_multipart_is_upload_error(client, provider, upload_dir):
    fields = {f"note{i}": "x" for i in range(1001)}
    response = client.post("/generate-image", files=[image_part()], data=fields)

    assert response.status_code == 400
    assert response.json()["code"] == "UploadError"
    assert leftover_files(upload_dir) == []
    assert provider.post_calls == []


def test_part_with_empty_filename_is_stored_as_jpg(client, monkeypatch, upload_dir):
    seen = []

    def fake_dispatch(transformation_type, files, config, prompt=None):
        seen.extend((f, os.path.exists(f.path)) for f in files)
        return "https://img.example/empty-name.png"

    monkeypatch.setattr("image.services.dispatch", fake_dispatch)
    boundary = "photo-boundary"
    body = (
        f"--{boundary}\r\n"
        'Content-Disposition: form-data; name="images"; filename=""\r\n'
        "Content-Type: image/jpeg\r\n\r\n"
    ).encode() + JPEG_BYTES + f"\r\n--{boundary}--\r\n".encode()

    response = client.post(
        "/generate-image",
        content=body,
        headers={"Content-Type": f"multipart/form-data; boundary={boundary}"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["imageUrl"] == "https://img.example/empty-name.png"
    assert len(seen) == 1
    stored, existed = seen[0]
    assert existed
    assert stored.filename.startswith(f"{FILENAME_PREFIX}-")
    assert stored.filename.endswith(".jpg")
    assert stored.original_name is None
    assert stored.size == len(JPEG_BYTES)
    assert leftover_files(upload_dir) == []


def test_upload_dir_is_created_at_startup(monkeypatch, make_config, upload_dir):
    from fastapi.testclient import TestClient
    import app as app_module

    monkeypatch.setattr(app_module, "config", make_config())
    assert not os.path.exists(upload_dir)

    with TestClient(app_module.app):
        assert os.path.isdir(upload_dir)
