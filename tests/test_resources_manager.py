import base64
import json
from urllib.parse import parse_qs, urlsplit

import pytest

from mediavault.core.api import ResourcesClient
from mediavault.core.dto import ImageInfo, ResourceDTO, ResourceFilter
from mediavault.core.errors import APIError, HTTPStatusError
from mediavault.core.resource_builder import ResourceDraft
from mediavault.core.resources_manager import ResourcesManager

from conftest import make_resource


@pytest.fixture
def resources(http):
    return ResourcesManager(ResourcesClient(http))


def _query(request):
    return parse_qs(urlsplit(request.url).query)


def test_list_without_filter_sends_no_query(resources, adapter):
    adapter.queue({"data": [make_resource()], "total": 1, "page": 1, "limit": 20})

    items = resources.list()

    assert urlsplit(adapter.last.url).query == ""
    assert [r.id for r in items] == [7]


def test_list_sends_only_given_filters(resources, adapter):
    adapter.queue({"data": [], "total": 0, "page": 2, "limit": 20})

    resources.list(ResourceFilter(type="video", page=2))

    assert _query(adapter.last) == {"type": ["video"], "page": ["2"]}


def test_list_page_keeps_server_order_and_totals(resources, adapter):
    adapter.queue({
        "data": [make_resource(id=3), make_resource(id=1), {"title": "no id"}, make_resource(id=2)],
        "total": 45,
        "page": 2,
        "limit": 20,
    })

    page = resources.list_page(ResourceFilter(page=2, limit=20))

    assert [r.id for r in page.resources] == [3, 1, 2]
    assert page.total == 45
    assert page.page_count == 3
    assert page.has_more


def test_list_rejects_non_list_data(resources, adapter):
    adapter.queue({"data": {"id": 1}})
    with pytest.raises(APIError):
        resources.list()


def test_filter_rejects_invalid_values():
    with pytest.raises(ValueError):
        ResourceFilter(type="audio")
    with pytest.raises(ValueError):
        ResourceFilter(page=0)


def test_get_then_update_round_trip_is_identical(resources, adapter):
    raw = make_resource()
    adapter.queue({"data": raw})
    fetched = resources.get(7)

    adapter.queue({"data": raw})
    updated = resources.update(7, fetched)

    assert adapter.last.method == "PUT"
    assert adapter.last.url == "http://api.test/api/resources/7"
    sent = json.loads(adapter.last.body)
    assert sent == fetched.to_payload()
    assert "id" not in sent and "created_at" not in sent
    assert updated == fetched


def test_partial_update_sends_only_supplied_fields(resources, adapter):
    adapter.queue({"data": make_resource(title="New")})

    updated = resources.update(7, {"title": "New", "images": [ImageInfo(url="https://cdn.test/2.jpg")]})

    assert json.loads(adapter.last.body) == {
        "title": "New",
        "images": [{"url": "https://cdn.test/2.jpg", "width": 0, "height": 0, "size": 0, "mime_type": ""}],
    }
    assert updated.title == "New"


def test_update_rejects_unknown_and_empty(resources, adapter):
    with pytest.raises(ValueError):
        resources.update(7, {"id": 8})
    with pytest.raises(ValueError):
        resources.update(7, {})
    assert adapter.requests == []


def test_invalid_ids_are_rejected_before_network(resources, adapter):
    for bad in (0, -1, True, "7"):
        with pytest.raises(ValueError):
            resources.get(bad)
    assert adapter.requests == []


def test_create_from_draft(resources, adapter):
    adapter.queue({"data": make_resource(id=11)})

    created = resources.create(ResourceDraft(title="Sunset", images=[ImageInfo(url="file:///a.jpg")]))

    body = json.loads(adapter.last.body)
    assert adapter.last.method == "POST"
    assert body["title_en"] == "Sunset"
    assert body["is_approved"] is False
    assert len(body["links"]) == 14
    assert created.id == 11


def test_delete_and_missing_resource(resources, adapter):
    adapter.queue(status=204)
    assert resources.delete(7) is True
    assert adapter.last.method == "DELETE"

    adapter.queue({"error": "Resource not found"}, status=404)
    with pytest.raises(HTTPStatusError) as excinfo:
        resources.delete(12345)
    assert excinfo.value.is_not_found


def test_legacy_video_url_is_migrated(resources, adapter):
    raw = make_resource(resource_type="video", images=[], videos=None, video_url="https://v.test/a.mp4")
    adapter.queue({"data": raw})

    resource = resources.get(7)

    assert resource.is_video
    assert [(v.url, v.is_local) for v in resource.videos] == [("https://v.test/a.mp4", False)]
    assert "video_url" not in resource.to_payload()


def test_links_always_have_every_provider():
    resource = ResourceDTO.from_raw(make_resource(links=None))
    assert len(resource.links) == 14
    assert all(urls == [] for urls in resource.links.values())


def test_stats_and_health(resources, adapter):
    adapter.queue({"total": 10, "pending": 2, "approved": 7, "rejected": 1,
                   "videos": 4, "images": 6, "local": 3, "external": 7})
    stats = resources.get_stats()
    assert adapter.last.url == "http://api.test/api/resources/stats"
    assert (stats.total, stats.pending, stats.external) == (10, 2, 7)

    adapter.queue({"status": "ok", "timestamp": "2024-01-01T00:00:00Z"})
    health = resources.health()
    assert adapter.last.url == "http://api.test/health"
    assert health.ok


def test_list_survives_out_of_range_numbers(resources, adapter):
    adapter.queue({"data": [
        make_resource(),
        make_resource(id=8, images=[{"url": "https://cdn.test/8.jpg", "width": 1e400}]),
        make_resource(id=9, tmdb_id=1e400),
        make_resource(id=10, liked_by=[1e400]),
    ], "total": "1e400"})

    page = resources.list_page()

    assert [r.id for r in page.resources] == [7, 8]
    assert page.resources[1].images[0].width == 0
    assert page.total == 2


def test_single_resource_with_out_of_range_id_is_api_error(resources, adapter):
    adapter.queue({"data": make_resource(id=1e400)})

    with pytest.raises(APIError):
        resources.get(7)


def test_decrypt_posts_key_parts_and_decodes(resources, adapter):
    adapter.queue({"data": base64.b64encode(b"\x89PNG-bytes").decode(), "message": "ok"})

    content = resources.decrypt(7, "part-a", "part-b")

    assert adapter.last.method == "POST"
    assert adapter.last.url == "http://api.test/api/resources/7/decrypt"
    assert json.loads(adapter.last.body) == {"key_part_a": "part-a", "ukey_part_b": "part-b"}
    assert content == b"\x89PNG-bytes"


def test_decrypt_with_wrong_key_is_401(resources, adapter):
    adapter.queue({"data": "", "message": "key verification failed"}, status=401)

    with pytest.raises(HTTPStatusError) as excinfo:
        resources.decrypt(7, "part-a", "wrong")
    assert excinfo.value.status_code == 401


@pytest.mark.parametrize("data", ["not base64!", None, 42])
def test_decrypt_rejects_bad_payload(resources, adapter, data):
    adapter.queue({"data": data, "message": "ok"})

    with pytest.raises(APIError):
        resources.decrypt(7, "part-a", "part-b")


def test_decrypt_requires_both_key_parts(resources, adapter):
    with pytest.raises(ValueError):
        resources.decrypt(7, "", "part-b")
    with pytest.raises(ValueError):
        resources.decrypt(0, "part-a", "part-b")
    assert adapter.requests == []
