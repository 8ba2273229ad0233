# metal_client/client.py
from __future__ import annotations
import logging
from typing import Any, Sequence

import httpx

from .config import ClientConfig
from .exceptions import MissingParameterError
from .files import FileInput, resolve_file, sanitize_filename, validate_file_type
from .request import request
from . import models as M

logger = logging.getLogger("metal_client")


class Metal:
    def __init__(self, config: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None):
        self.cfg = config
        # injectable for tests; None means httpx's default network transport
        self._transport = transport

    # ------------ low-level helpers ------------
    def _headers(self, **extra: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-metal-api-key": self.cfg.api_key,
            "x-metal-client-id": self.cfg.client_id,
            **extra,
        }

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        kwargs.setdefault("headers", self._headers())
        return await request(
            method,
            self.cfg.url(path),
            timeout=self.cfg.timeout_s,
            transport=self._transport,
            **kwargs,
        )

    def _index_id(self, index_id: str | None) -> str:
        index = index_id if index_id is not None else self.cfg.index_id
        if not index:
            raise MissingParameterError("indexId required")
        return index

    def _app_id(self, app_id: str | None) -> str:
        app = app_id if app_id is not None else self.cfg.app_id
        if not app:
            raise MissingParameterError("appId required")
        return app

    @staticmethod
    def _require(value: Any, name: str) -> None:
        if not value:
            raise MissingParameterError(f"{name} required")

    # ------------ Index ------------
    async def index(self, payload: M.IndexInput) -> Any:
        index = self._index_id(payload.index_id)
        if not (payload.image_base64 or payload.image_url or payload.text or payload.embedding is not None):
            raise MissingParameterError("payload required")

        body = M.IndexPayload(index=index, id=payload.id or None, metadata=payload.metadata or None)
        # exactly one content field is sent, first match wins
        if payload.image_base64:
            body.image_base64 = payload.image_base64
        elif payload.image_url:
            body.image_url = payload.image_url
        elif payload.text:
            body.text = payload.text
        else:
            body.embedding = payload.embedding

        return await self._request("POST", "/v1/index", json=body.wire())

    async def index_many(self, payload: Sequence[M.IndexPayload]) -> Any:
        if not payload:
            raise MissingParameterError("payload required")
        body = M.BulkIndexPayload(data=list(payload))
        return await self._request("POST", "/v1/index/bulk", json=body.wire())

    # ------------ Search ------------
    async def search(self, payload: M.SearchInput | None = None) -> Any:
        payload = payload or M.SearchInput()
        index = self._index_id(payload.index_id)

        body = M.SearchPayload(index=index, filters=payload.filters)
        if payload.image_base64:
            body.image_base64 = payload.image_base64
        elif payload.image_url:
            body.image_url = payload.image_url
        elif payload.text:
            body.text = payload.text
        elif payload.embedding is not None:
            body.embedding = payload.embedding

        params: dict[str, Any] = {"limit": payload.limit}
        if payload.ids_only:
            params["idsOnly"] = "true"

        return await self._request("POST", "/v1/search", json=body.wire(), params=params)

    # ------------ Tuning ------------
    async def tune(self, payload: M.TuningInput) -> Any:
        index = self._index_id(payload.index_id)
        if not payload.id_a or not payload.id_b:
            raise MissingParameterError("idA, idB, & label required for payload")
        body = M.TuningPayload(index=index, id_a=payload.id_a, id_b=payload.id_b, label=payload.label)
        return await self._request("POST", "/v1/tune", json=body.wire())

    # ------------ Documents ------------
    async def get_one(self, id: str, index_id: str | None = None) -> Any:
        self._require(id, "id")
        index = self._index_id(index_id)
        return await self._request("GET", f"/v1/indexes/{index}/documents/{id}")

    async def delete_one(self, id: str, index_id: str | None = None) -> Any:
        self._require(id, "id")
        index = self._index_id(index_id)
        return await self._request("DELETE", f"/v1/indexes/{index}/documents/{id}")

    async def delete_many(self, ids: Sequence[str], index_id: str | None = None) -> Any:
        index = self._index_id(index_id)
        self._require(ids, "ids")
        return await self._request("DELETE", f"/v1/indexes/{index}/documents/bulk", json={"ids": list(ids)})

    # ------------ Files ------------
    async def _create_resource(self, index_id: str, file_name: str, file_type: str, file_size: int) -> M.ResourceHandle:
        body = M.FilePayload(file_name=file_name, file_type=file_type)
        data = await self._request(
            "POST",
            f"/v1/indexes/{index_id}/files",
            json=body.wire(),
            headers=self._headers(**{"x-metal-file-size": str(file_size)}),
            phase="create_resource",
        )
        return M.ResourceHandle.model_validate(data)

    async def _upload_file_to_url(self, url: str, content: Any, file_type: str, file_size: int) -> Any:
        # the signed URL is the credential; api key headers are not sent
        headers = {
            "content-type": file_type,
            "content-length": str(file_size),
        }
        return await request(
            "PUT",
            url,
            headers=headers,
            content=content,
            timeout=self.cfg.timeout_s,
            transport=self._transport,
            phase="transfer",
        )

    async def upload_file(self, file: FileInput, index_id: str | None = None) -> Any:
        """Upload a PDF, DOCX, XLS or CSV file into an index.

        The file is resolved and type-checked locally first; only then is a
        signed upload URL requested and the bytes PUT to it. A failure in
        either network step raises ``RequestError`` with ``phase`` set to
        ``"create_resource"`` or ``"transfer"``.
        """
        index = self._index_id(index_id)
        target = resolve_file(file)
        validate_file_type(target.file_type)

        file_name = sanitize_filename(target.file_name)
        resource = await self._create_resource(index, file_name, target.file_type, target.file_size)
        logger.debug("Uploading %s (%d bytes) to index %s", file_name, target.file_size, index)
        return await self._upload_file_to_url(resource.url, target.body(), target.file_type, target.file_size)

    # ------------ Datasources ------------
    async def add_datasource(self, payload: M.DatasourceInput) -> Any:
        self._require(payload.name, "name")
        return await self._request("POST", "/v1/datasources", json=payload.wire())

    async def get_datasource(self, datasource_id: str) -> Any:
        self._require(datasource_id, "datasourceId")
        return await self._request("GET", f"/v1/datasources/{datasource_id}")

    async def update_datasource(self, datasource_id: str, payload: M.DatasourceInput) -> Any:
        self._require(datasource_id, "datasourceId")
        return await self._request("PUT", f"/v1/datasources/{datasource_id}", json=payload.wire())

    async def delete_datasource(self, datasource_id: str) -> Any:
        self._require(datasource_id, "datasourceId")
        return await self._request("DELETE", f"/v1/datasources/{datasource_id}")

    async def list_datasources(self, limit: int = 10, page: int = 1) -> Any:
        return await self._request("GET", "/v1/datasources", params={"limit": limit, "page": page})

    # ------------ Data entities ------------
    async def add_data_entity(self, payload: M.DataEntityInput) -> Any:
        self._require(payload.datasource, "datasource")
        self._require(payload.name, "name")
        return await self._request("POST", "/v1/data-entities", json=payload.wire())

    async def get_data_entity(self, data_entity_id: str) -> Any:
        self._require(data_entity_id, "dataEntityId")
        return await self._request("GET", f"/v1/data-entities/{data_entity_id}")

    async def delete_data_entity(self, data_entity_id: str) -> Any:
        self._require(data_entity_id, "dataEntityId")
        return await self._request("DELETE", f"/v1/data-entities/{data_entity_id}")

    async def list_data_entities(self, datasource_id: str, limit: int = 10, page: int = 1) -> Any:
        self._require(datasource_id, "datasourceId")
        return await self._request(
            "GET",
            f"/v1/datasources/{datasource_id}/data-entities",
            params={"limit": limit, "page": page},
        )

    # ------------ Apps ------------
    async def add_app(self, payload: M.AppInput) -> Any:
        self._require(payload.name, "name")
        self._require(payload.indexes, "indexes")
        return await self._request("POST", "/v1/apps", json=payload.wire())

    async def get_app(self, app_id: str | None = None) -> Any:
        app = self._app_id(app_id)
        return await self._request("GET", f"/v1/apps/{app}")

    async def update_app(self, app_id: str | None, payload: M.AppInput) -> Any:
        app = self._app_id(app_id)
        return await self._request("PUT", f"/v1/apps/{app}", json=payload.wire())

    async def list_apps(self) -> Any:
        return await self._request("GET", "/v1/apps")
