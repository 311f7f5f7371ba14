"""
Blob storage client, project image resolver and proxy tests.
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from solidsteel.core.storage import StorageError, is_blob_url
from solidsteel.modules.blob.resolver import (
    candidate_prefixes,
    find_project_images,
    organize_project_images,
)
from solidsteel.modules.blob.routes import TRANSPARENT_GIF

BASE = "https://store.public.blob.vercel-storage.com"


def blob(pathname, uploaded_at="2024-01-01T00:00:00.000Z", size=100):
    return {"url": f"{BASE}/{pathname}", "pathname": pathname, "size": size, "uploadedAt": uploaded_at}


def listing(*blobs, has_more=False, cursor=None):
    return {"blobs": list(blobs), "hasMore": has_more, "cursor": cursor}


def fake_store(contents, failing=()):
    """list_files stand-in serving {prefix: [blobs]}"""
    def list_files(prefix=None, limit=None, cursor=None):
        if prefix in failing:
            raise StorageError("boom")
        return listing(*contents.get(prefix, []))
    return list_files


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

def test_candidate_prefix_order():
    assert candidate_prefixes("greystone-village") == [
        "projects/greystone-village/",
        "Projects/greystone-village/",
        "projects/Greystone-village/",
        "Projects/Greystone-village/",
        "projects/greystone/",
        "Projects/greystone/",
    ]


def test_candidate_prefixes_dedupe_single_word():
    assert candidate_prefixes("Airdrie") == ["projects/Airdrie/", "Projects/Airdrie/"]


def test_resolver_no_match_returns_empty(app):
    with patch("solidsteel.modules.blob.resolver.list_files", side_effect=fake_store({})) as lister:
        assert find_project_images("greystone-village") == []
    assert lister.call_count == 6


def test_resolver_first_matching_prefix_wins(app):
    contents = {
        "Projects/greystone/": [blob("Projects/greystone/hero.jpg")],
        "projects/greystone/": [blob("projects/greystone/a.png")],
    }
    with patch("solidsteel.modules.blob.resolver.list_files", side_effect=fake_store(contents)):
        images = find_project_images("greystone-village")

    assert [img["pathname"] for img in images] == ["projects/greystone/a.png"]
    assert images[0]["filename"] == "a.png"
    assert set(images[0]) == {"url", "pathname", "filename", "size", "uploadedAt"}


def test_resolver_filters_non_images(app):
    contents = {
        "Projects/bow-plaza/": [
            blob("Projects/bow-plaza/.placeholder"),
            blob("Projects/bow-plaza/spec.pdf"),
            blob("Projects/bow-plaza/FRONT.JPEG"),
            blob("Projects/bow-plaza/side.avif"),
        ],
    }
    with patch("solidsteel.modules.blob.resolver.list_files", side_effect=fake_store(contents)):
        images = find_project_images("bow-plaza")

    assert [img["filename"] for img in images] == ["FRONT.JPEG", "side.avif"]


def test_resolver_skips_prefix_with_only_placeholder(app):
    contents = {
        "projects/bow-plaza/": [blob("projects/bow-plaza/.placeholder")],
        "Projects/bow-plaza/": [blob("Projects/bow-plaza/1.webp")],
    }
    with patch("solidsteel.modules.blob.resolver.list_files", side_effect=fake_store(contents)):
        images = find_project_images("bow-plaza")

    assert [img["pathname"] for img in images] == ["Projects/bow-plaza/1.webp"]


def test_resolver_continues_after_listing_error(app):
    contents = {"Projects/bow-plaza/": [blob("Projects/bow-plaza/1.jpg")]}
    lister = fake_store(contents, failing=("projects/bow-plaza/",))
    with patch("solidsteel.modules.blob.resolver.list_files", side_effect=lister):
        images = find_project_images("bow-plaza")

    assert len(images) == 1


def test_resolver_all_prefixes_failing(app):
    with patch("solidsteel.modules.blob.resolver.list_files", side_effect=StorageError("down")):
        assert find_project_images("bow-plaza") == []


@pytest.mark.parametrize("slug", ["", "../secrets", "a/b", "-leading"])
def test_resolver_invalid_slug(app, slug):
    with patch("solidsteel.modules.blob.resolver.list_files") as lister:
        assert find_project_images(slug) == []
    lister.assert_not_called()


def test_resolver_follows_cursor(app):
    pages = [
        listing(blob("projects/bow/1.jpg"), has_more=True, cursor="c1"),
        listing(blob("projects/bow/2.jpg")),
    ]
    with patch("solidsteel.modules.blob.resolver.list_files", side_effect=pages) as lister:
        images = find_project_images("bow")

    assert len(images) == 2
    assert lister.call_args.kwargs["cursor"] == "c1"


def test_organize_prefers_hero_keyword():
    images = [
        {"url": "a", "filename": "site.jpg", "uploadedAt": "2024-03-01"},
        {"url": "b", "filename": "Main-Entrance.jpg", "uploadedAt": "2024-01-01"},
        {"url": "c", "filename": "detail.jpg", "uploadedAt": "2024-02-01"},
    ]
    hero, gallery = organize_project_images(images)

    assert hero == "b"
    assert gallery == ["a", "c"]


def test_organize_falls_back_to_newest():
    images = [
        {"url": "a", "filename": "1.jpg", "uploadedAt": "2024-01-01"},
        {"url": "b", "filename": "2.jpg", "uploadedAt": "2024-05-01"},
    ]
    assert organize_project_images(images) == ("b", ["a"])


def test_organize_empty():
    assert organize_project_images([]) == (None, [])


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

def test_project_images_route(client):
    images = [{"url": "u", "pathname": "projects/x/hero.jpg", "filename": "hero.jpg",
               "size": 1, "uploadedAt": "2024-01-01"}]
    with patch("solidsteel.modules.blob.routes.find_project_images", return_value=images):
        response = client.get("/api/blob/projects/x/images")

    assert response.status_code == 200
    assert response.get_json() == {
        "success": True,
        "images": images,
        "count": 1,
        "heroImage": "u",
        "galleryImages": [],
    }
    assert response.headers["Cache-Control"] == "public, s-maxage=3600, stale-while-revalidate=86400"


def test_project_images_route_no_match(client):
    with patch("solidsteel.modules.blob.resolver.list_files", side_effect=fake_store({})):
        response = client.get("/api/blob/projects/nothing-here/images")

    assert response.status_code == 200
    assert response.get_json()["images"] == []
    assert response.get_json()["count"] == 0


def test_ensure_folder_requires_admin(client):
    with patch("solidsteel.modules.blob.routes.upload_file") as upload:
        assert client.post("/api/blob/projects/x/ensure-folder").status_code == 401
    upload.assert_not_called()


def test_ensure_folder(admin_client):
    with patch("solidsteel.modules.blob.routes.upload_file") as upload:
        response = admin_client.post("/api/blob/projects/bow-plaza/ensure-folder")

    assert response.status_code == 200
    upload.assert_called_once_with(b"", "Projects/bow-plaza/.placeholder")


def test_ensure_folder_storage_error(admin_client):
    with patch("solidsteel.modules.blob.routes.upload_file", side_effect=StorageError("down")):
        response = admin_client.post("/api/blob/projects/bow-plaza/ensure-folder")
    assert response.status_code == 500


@pytest.mark.parametrize("url", [
    "https://blob.vercel-storage.com/a.jpg",
    "https://abc.public.blob.vercel-storage.com/projects/a.jpg",
])
def test_is_blob_url_accepts(url):
    assert is_blob_url(url)


@pytest.mark.parametrize("url", [
    "http://abc.public.blob.vercel-storage.com/a.jpg",
    "https://evil.example.com/blob.vercel-storage.com/a.jpg",
    "https://blob.vercel-storage.com.evil.example.com/a.jpg",
    "not a url",
])
def test_is_blob_url_rejects(url):
    assert not is_blob_url(url)


def test_proxy_requires_url(client):
    response = client.get("/api/blob-proxy")
    assert response.status_code == 400
    assert response.get_json() == {"error": "URL parameter is required"}


def test_proxy_rejects_foreign_url(client):
    with patch("solidsteel.modules.blob.routes.fetch_blob") as fetch:
        response = client.get("/api/blob-proxy?url=https://example.com/a.jpg")
    assert response.status_code == 400
    fetch.assert_not_called()


def test_proxy_streams_image(client):
    upstream = MagicMock(ok=True, content=b"PNGDATA", headers={"content-type": "image/png"})
    with patch("solidsteel.modules.blob.routes.fetch_blob", return_value=upstream):
        response = client.get(f"/api/blob-proxy?url={BASE}/a.png")

    assert response.status_code == 200
    assert response.data == b"PNGDATA"
    assert response.headers["Content-Type"] == "image/png"
    assert "max-age=604800" in response.headers["Cache-Control"]


def test_proxy_upstream_error_returns_pixel(client):
    upstream = MagicMock(ok=False, status_code=404)
    with patch("solidsteel.modules.blob.routes.fetch_blob", return_value=upstream):
        response = client.get(f"/api/blob-proxy?url={BASE}/missing.png")

    assert response.status_code == 200
    assert response.data == TRANSPARENT_GIF
    assert response.headers["Content-Type"] == "image/gif"
    assert response.headers["Cache-Control"] == "no-cache"


def test_proxy_network_error_returns_pixel(client):
    with patch("solidsteel.modules.blob.routes.fetch_blob", side_effect=requests.Timeout("slow")):
        response = client.get(f"/api/blob-proxy?url={BASE}/a.png")

    assert response.status_code == 200
    assert response.data == TRANSPARENT_GIF


# ---------------------------------------------------------------------------
# Storage client
# ---------------------------------------------------------------------------

def test_list_files_sends_auth(app):
    from solidsteel.core.storage import list_files

    resp = MagicMock(ok=True)
    resp.json.return_value = {"blobs": [blob("projects/a/1.jpg")], "hasMore": False}
    with app.app_context(), patch("solidsteel.core.storage.requests.get", return_value=resp) as get:
        result = list_files(prefix="projects/a/", limit=100)

    assert result["blobs"][0]["pathname"] == "projects/a/1.jpg"
    assert get.call_args.kwargs["params"] == {"prefix": "projects/a/", "limit": 100}
    assert get.call_args.kwargs["headers"]["Authorization"] == "Bearer blob-test-token"
    assert get.call_args.kwargs["timeout"] == 30


def test_upload_file_http_error(app):
    from solidsteel.core.storage import upload_file

    resp = MagicMock(ok=False, status_code=403, text="forbidden")
    with app.app_context(), patch("solidsteel.core.storage.requests.put", return_value=resp):
        with pytest.raises(StorageError):
            upload_file(b"x", "general/1.jpg", content_type="image/jpeg")


def test_storage_without_token(tmp_data_dir):
    from conftest import make_app
    from solidsteel.core.storage import list_files

    app = make_app(tmp_data_dir, BLOB_READ_WRITE_TOKEN="")
    with app.app_context(), patch("solidsteel.core.storage.requests.get") as get:
        with pytest.raises(StorageError):
            list_files(prefix="projects/")
    get.assert_not_called()


def test_delete_file(app):
    from solidsteel.core.storage import delete_file

    url = f"{BASE}/projects/a/1.jpg"
    with app.app_context(), patch("solidsteel.core.storage.requests.post") as post:
        post.return_value.ok = True
        assert delete_file(url) is True

    assert post.call_args.args[0].endswith("/delete")
    assert post.call_args.kwargs["json"] == {"urls": [url]}


def test_delete_file_http_error(app):
    from solidsteel.core.storage import delete_file

    with app.app_context(), patch("solidsteel.core.storage.requests.post") as post:
        post.return_value.ok = False
        post.return_value.status_code = 500
        with pytest.raises(StorageError):
            delete_file(f"{BASE}/projects/a/1.jpg")
