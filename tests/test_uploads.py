"""
Upload endpoint tests. Blob storage is patched at the route module.
"""

import io
from unittest.mock import patch

import pytest

from solidsteel.core.storage import StorageError
from solidsteel.modules.uploads.routes import resolve_folder, safe_extension

UPLOAD_RESULT = {
    "url": "https://store.public.blob.vercel-storage.com/general/1.jpg",
    "pathname": "general/1.jpg",
    "contentType": "image/jpeg",
    "contentDisposition": "",
}


def file_data(content=b"\xff\xd8\xff", filename="photo.JPG", content_type="image/jpeg", **fields):
    data = {"file": (io.BytesIO(content), filename, content_type)}
    data.update(fields)
    return data


@pytest.fixture
def upload():
    with patch("solidsteel.modules.uploads.routes.upload_file", return_value=UPLOAD_RESULT) as mock:
        yield mock


@pytest.mark.parametrize("requested,folder", [
    ("projects", "projects"),
    ("quote-requests", "quote-requests"),
    ("proforma-consultations", "proforma-consultations"),
    ("../etc", "general"),
    ("Projects", "general"),
    ("", "general"),
])
def test_resolve_folder(requested, folder):
    assert resolve_folder(requested) == folder


@pytest.mark.parametrize("filename,ext", [
    ("photo.JPG", "jpg"),
    ("photo.webp", "webp"),
    ("archive.tar.png", "png"),
    ("script.php", "jpg"),
    ("noextension", "jpg"),
    ("weird.pn$g", "png"),
])
def test_safe_extension(filename, ext):
    assert safe_extension(filename) == ext


def test_upload_image(client, upload):
    with patch("solidsteel.modules.uploads.routes.time.time", return_value=1700000000.5):
        response = client.post(
            "/api/upload",
            data=file_data(folder="projects"),
            content_type="multipart/form-data",
        )

    assert response.status_code == 200
    assert response.get_json() == {
        "success": True,
        "url": UPLOAD_RESULT["url"],
        "pathname": UPLOAD_RESULT["pathname"],
    }
    content, pathname = upload.call_args.args
    assert content == b"\xff\xd8\xff"
    assert pathname == "projects/1700000000500.jpg"
    assert upload.call_args.kwargs["content_type"] == "image/jpeg"


def test_upload_unknown_folder_falls_back(client, upload):
    client.post("/api/upload", data=file_data(folder="secrets"), content_type="multipart/form-data")
    assert upload.call_args.args[1].startswith("general/")


def test_upload_missing_file(client, upload):
    response = client.post("/api/upload", data={}, content_type="multipart/form-data")

    assert response.status_code == 400
    assert response.get_json() == {"error": "No file provided"}
    upload.assert_not_called()


def test_upload_rejects_type(client, upload):
    response = client.post(
        "/api/upload",
        data=file_data(filename="doc.pdf", content_type="application/pdf"),
        content_type="multipart/form-data",
    )

    assert response.status_code == 400
    assert response.get_json() == {"error": "Invalid file type"}
    upload.assert_not_called()


def test_upload_rejects_large_image(client, upload):
    big = b"0" * (10 * 1024 * 1024 + 1)
    response = client.post("/api/upload", data=file_data(content=big), content_type="multipart/form-data")

    assert response.status_code == 400
    assert response.get_json() == {"error": "File too large"}
    upload.assert_not_called()


def test_upload_storage_failure(client):
    with patch("solidsteel.modules.uploads.routes.upload_file", side_effect=StorageError("down")):
        response = client.post("/api/upload", data=file_data(), content_type="multipart/form-data")

    assert response.status_code == 500
    assert response.get_json() == {"error": "Failed to upload file"}


# ---------------------------------------------------------------------------
# Hero video
# ---------------------------------------------------------------------------

def video_data(content_type="video/mp4"):
    return {"file": (io.BytesIO(b"\x00\x00\x00\x18ftypmp42"), "clip.mp4", content_type)}


def test_video_requires_admin(client, upload):
    response = client.post("/api/upload/video", data=video_data(), content_type="multipart/form-data")

    assert response.status_code == 401
    upload.assert_not_called()


def test_video_upload_fixed_pathname(app, admin_client, upload):
    response = admin_client.post("/api/upload/video", data=video_data(), content_type="multipart/form-data")

    assert response.status_code == 200
    assert upload.call_args.args[1] == app.config["HERO_VIDEO_PATHNAME"]


def test_video_rejects_type(admin_client, upload):
    response = admin_client.post(
        "/api/upload/video", data=video_data("image/gif"), content_type="multipart/form-data"
    )

    assert response.status_code == 400
    assert "Invalid file type" in response.get_json()["error"]
    upload.assert_not_called()


def test_oversized_request_rejected(tmp_data_dir):
    from conftest import make_app

    app = make_app(tmp_data_dir, MAX_CONTENT_LENGTH=1024)
    response = app.test_client().post(
        "/api/upload", data=file_data(content=b"0" * 4096), content_type="multipart/form-data"
    )
    assert response.status_code == 413
