from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from metal_client import models as M
from metal_client.exceptions import MissingParameterError

JSON_HEADERS = {
    "content-type": "application/json",
    "x-metal-api-key": "api-key",
    "x-metal-client-id": "client-id",
}


def _assert_json_headers(req: httpx.Request):
    for k, v in JSON_HEADERS.items():
        assert req.headers[k] == v


def test_index_sends_text_payload(fake_api, make_client):
    api = fake_api(httpx.Response(201, json={"data": {"id": "doc-1"}}))
    cli = make_client(api, index_id="index-id")

    out = asyncio.run(cli.index(M.IndexInput(text="text-to-index", metadata={"k": "v"})))

    assert out == {"id": "doc-1"}
    req = api.requests[0]
    assert req.method == "POST"
    assert str(req.url) == "https://api.getmetal.io/v1/index"
    assert json.loads(req.content) == {"index": "index-id", "text": "text-to-index", "metadata": {"k": "v"}}
    _assert_json_headers(req)


def test_index_sends_only_first_content_field(fake_api, make_client):
    api = fake_api()
    cli = make_client(api, index_id="index-id")
    asyncio.run(cli.index(M.IndexInput(image_url="image.png", text="ignored", embedding=[1, 2, 3])))
    assert json.loads(api.requests[0].content) == {"index": "index-id", "imageUrl": "image.png"}


def test_index_sends_embedding(fake_api, make_client):
    api = fake_api()
    cli = make_client(api)
    asyncio.run(cli.index(M.IndexInput(index_id="other", embedding=[1, 2, 3])))
    assert json.loads(api.requests[0].content) == {"index": "other", "embedding": [1.0, 2.0, 3.0]}


def test_index_requires_index_id(fake_api, make_client):
    api = fake_api()
    cli = make_client(api)
    with pytest.raises(MissingParameterError, match="indexId required"):
        asyncio.run(cli.index(M.IndexInput(text="x")))
    assert api.requests == []


def test_index_requires_payload(fake_api, make_client):
    api = fake_api()
    cli = make_client(api, index_id="index-id")
    with pytest.raises(MissingParameterError, match="payload required"):
        asyncio.run(cli.index(M.IndexInput()))
    assert api.requests == []


def test_index_many_wraps_items(fake_api, make_client):
    api = fake_api()
    cli = make_client(api)
    items = [M.IndexPayload(index="i", text="a"), M.IndexPayload(index="i", id="2", text="b")]
    asyncio.run(cli.index_many(items))
    req = api.requests[0]
    assert str(req.url) == "https://api.getmetal.io/v1/index/bulk"
    assert json.loads(req.content) == {"data": [{"index": "i", "text": "a"}, {"index": "i", "id": "2", "text": "b"}]}


def test_search_builds_query_string(fake_api, make_client):
    api = fake_api(httpx.Response(200, json={"data": [{"id": "a"}]}))
    cli = make_client(api, index_id="index-id")

    hits = asyncio.run(
        cli.search(
            M.SearchInput(
                text="text-to-search",
                ids_only=True,
                limit=3,
                filters=[M.Filter(field="tag", value="ann")],
            )
        )
    )

    assert hits == [{"id": "a"}]
    req = api.requests[0]
    assert req.url.path == "/v1/search"
    assert req.url.params["limit"] == "3"
    assert req.url.params["idsOnly"] == "true"
    assert json.loads(req.content) == {
        "index": "index-id",
        "text": "text-to-search",
        "filters": [{"field": "tag", "value": "ann"}],
    }


def test_search_defaults(fake_api, make_client):
    api = fake_api()
    cli = make_client(api, index_id="index-id")
    asyncio.run(cli.search())
    req = api.requests[0]
    assert str(req.url) == "https://api.getmetal.io/v1/search?limit=10"
    assert json.loads(req.content) == {"index": "index-id"}


def test_tune(fake_api, make_client):
    api = fake_api()
    cli = make_client(api, index_id="index-id")
    asyncio.run(cli.tune(M.TuningInput(id_a="id-a", id_b="id-b", label=0)))
    req = api.requests[0]
    assert str(req.url) == "https://api.getmetal.io/v1/tune"
    assert json.loads(req.content) == {"index": "index-id", "idA": "id-a", "idB": "id-b", "label": 0}


def test_tune_requires_ids(fake_api, make_client):
    api = fake_api()
    cli = make_client(api, index_id="index-id")
    with pytest.raises(MissingParameterError, match="idA, idB, & label required"):
        asyncio.run(cli.tune(M.TuningInput(id_a="", id_b="b", label=1)))
    assert api.requests == []


def test_get_and_delete_one(fake_api, make_client):
    api = fake_api(httpx.Response(200, json={"data": {"id": "doc"}}), httpx.Response(204))
    cli = make_client(api, index_id="index-id")

    assert asyncio.run(cli.get_one("doc")) == {"id": "doc"}
    assert asyncio.run(cli.delete_one("doc", index_id="override")) is None

    get, delete = api.requests
    assert (get.method, get.url.path) == ("GET", "/v1/indexes/index-id/documents/doc")
    assert (delete.method, delete.url.path) == ("DELETE", "/v1/indexes/override/documents/doc")


def test_get_one_requires_id(fake_api, make_client):
    cli = make_client(fake_api(), index_id="index-id")
    with pytest.raises(MissingParameterError, match="id required"):
        asyncio.run(cli.get_one(""))


def test_delete_many_sends_ids_in_body(fake_api, make_client):
    api = fake_api()
    cli = make_client(api, index_id="index-id")
    asyncio.run(cli.delete_many(["a", "b"]))
    req = api.requests[0]
    assert (req.method, req.url.path) == ("DELETE", "/v1/indexes/index-id/documents/bulk")
    assert json.loads(req.content) == {"ids": ["a", "b"]}


def test_delete_many_requires_ids(fake_api, make_client):
    cli = make_client(fake_api(), index_id="index-id")
    with pytest.raises(MissingParameterError, match="ids required"):
        asyncio.run(cli.delete_many([]))


def test_datasources(fake_api, make_client):
    api = fake_api()
    cli = make_client(api)
    payload = M.DatasourceInput(
        name="docs",
        source_type="File",
        auto_extract=True,
        metadata_fields=[M.MetadataField(name="author", type="string")],
    )

    asyncio.run(cli.add_datasource(payload))
    asyncio.run(cli.get_datasource("ds-1"))
    asyncio.run(cli.update_datasource("ds-1", M.DatasourceInput(name="renamed")))
    asyncio.run(cli.delete_datasource("ds-1"))
    asyncio.run(cli.list_datasources(limit=5, page=2))

    add, get, update, delete, listing = api.requests
    assert (add.method, add.url.path) == ("POST", "/v1/datasources")
    assert json.loads(add.content) == {
        "name": "docs",
        "sourcetype": "File",
        "autoExtract": True,
        "metadataFields": [{"name": "author", "type": "string"}],
    }
    assert (get.method, get.url.path) == ("GET", "/v1/datasources/ds-1")
    assert (update.method, json.loads(update.content)) == ("PUT", {"name": "renamed"})
    assert delete.method == "DELETE"
    assert str(listing.url) == "https://api.getmetal.io/v1/datasources?limit=5&page=2"


def test_data_entities(fake_api, make_client):
    api = fake_api()
    cli = make_client(api)

    asyncio.run(cli.add_data_entity(M.DataEntityInput(datasource="ds-1", name="report.pdf")))
    asyncio.run(cli.get_data_entity("de-1"))
    asyncio.run(cli.delete_data_entity("de-1"))
    asyncio.run(cli.list_data_entities("ds-1"))

    add, get, delete, listing = api.requests
    assert (add.method, add.url.path) == ("POST", "/v1/data-entities")
    assert json.loads(add.content) == {"datasource": "ds-1", "name": "report.pdf"}
    assert (get.method, get.url.path) == ("GET", "/v1/data-entities/de-1")
    assert (delete.method, delete.url.path) == ("DELETE", "/v1/data-entities/de-1")
    assert str(listing.url) == "https://api.getmetal.io/v1/datasources/ds-1/data-entities?limit=10&page=1"


def test_list_data_entities_requires_datasource(fake_api, make_client):
    api = fake_api()
    with pytest.raises(MissingParameterError, match="datasourceId required"):
        asyncio.run(make_client(api).list_data_entities(""))
    assert api.requests == []


def test_apps_fall_back_to_configured_app_id(fake_api, make_client):
    api = fake_api()
    cli = make_client(api, app_id="app-id")

    asyncio.run(cli.add_app(M.AppInput(name="demo", indexes=["index-id"])))
    asyncio.run(cli.get_app())
    asyncio.run(cli.update_app("other", M.AppInput(name="demo2", indexes=["a", "b"])))
    asyncio.run(cli.list_apps())

    add, get, update, listing = api.requests
    assert json.loads(add.content) == {"name": "demo", "indexes": ["index-id"]}
    assert get.url.path == "/v1/apps/app-id"
    assert (update.method, update.url.path) == ("PUT", "/v1/apps/other")
    assert (listing.method, listing.url.path) == ("GET", "/v1/apps")


def test_get_app_without_any_app_id(fake_api, make_client):
    api = fake_api()
    with pytest.raises(MissingParameterError, match="appId required"):
        asyncio.run(make_client(api).get_app())
    assert api.requests == []


def test_custom_base_url(fake_api, make_client):
    api = fake_api()
    cli = make_client(api, index_id="i", base_url="https://staging.example.com/")
    asyncio.run(cli.get_one("doc"))
    assert str(api.requests[0].url) == "https://staging.example.com/v1/indexes/i/documents/doc"


def test_explicit_empty_index_id_is_not_replaced_by_default(fake_api, make_client):
    api = fake_api()
    cli = make_client(api, index_id="cfg-index")
    with pytest.raises(MissingParameterError, match="indexId required"):
        asyncio.run(cli.get_one("doc", index_id=""))
    with pytest.raises(MissingParameterError, match="indexId required"):
        asyncio.run(cli.search(M.SearchInput(index_id="")))
    assert api.requests == []


def test_explicit_empty_app_id_is_not_replaced_by_default(fake_api, make_client):
    api = fake_api()
    with pytest.raises(MissingParameterError, match="appId required"):
        asyncio.run(make_client(api, app_id="cfg-app").get_app(""))
    assert api.requests == []
