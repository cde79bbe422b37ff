from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from opportunity_matcher.errors import StoreConflictError, StoreError
from opportunity_matcher.logging_config import get_logger
from opportunity_matcher.store.base import Mutator, Record, RecordStore

logger = get_logger(__name__)


class HttpRecordStore(RecordStore):
    """
    Client for a JSON document service:

      GET    {base}/{collection}/{key}          -> record (ETag header)
      PUT    {base}/{collection}/{key}          <- record (If-Match / If-None-Match)
      DELETE {base}/{collection}/{key}
      GET    {base}/{collection}?{field}={value} -> [record, ...]

    Existing records must carry an ETag; without one an update raises
    StoreError rather than writing blind.

    Transport failures and unexpected statuses raise StoreError. The only
    thing retried is a lost compare-and-swap (412), by re-reading the record.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
        max_cas_attempts: int = 5,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.max_cas_attempts = max_cas_attempts
        if headers:
            self.session.headers.update(headers)

    def _url(self, collection: str, key: Optional[str] = None) -> str:
        url = f"{self.base_url}/{quote(collection, safe='')}"
        if key is not None:
            url = f"{url}/{quote(key, safe='')}"
        return url

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise StoreError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _fail(resp: requests.Response, method: str, url: str) -> StoreError:
        return StoreError(f"{method} {url} returned HTTP {resp.status_code}: {resp.text[:200]}")

    def _json(self, resp: requests.Response, method: str, url: str):
        try:
            return resp.json()
        except ValueError as e:
            raise StoreError(f"{method} {url} returned invalid JSON: {e}") from e

    def _fetch(self, collection: str, key: str):
        url = self._url(collection, key)
        resp = self._request("GET", url)
        if resp.status_code == 404:
            return None, None
        if resp.status_code != 200:
            raise self._fail(resp, "GET", url)
        record = self._json(resp, "GET", url)
        if not isinstance(record, dict):
            raise StoreError(f"GET {url} did not return a JSON object")
        return record, resp.headers.get("ETag")

    def get(self, collection: str, key: str) -> Optional[Record]:
        record, _ = self._fetch(collection, key)
        return record

    def put(self, collection: str, key: str, record: Record, merge: bool = False) -> Record:
        if merge:
            def _merge(current: Optional[Record]) -> Record:
                merged = dict(current or {})
                merged.update(record)
                return merged

            return self.update(collection, key, _merge)

        url = self._url(collection, key)
        resp = self._request("PUT", url, json=record)
        if resp.status_code not in (200, 201, 204):
            raise self._fail(resp, "PUT", url)
        return dict(record)

    def query_by_field(self, collection: str, field: str, value: Any) -> List[Record]:
        url = self._url(collection)
        resp = self._request("GET", url, params={field: value})
        if resp.status_code == 404:
            return []
        if resp.status_code != 200:
            raise self._fail(resp, "GET", url)
        data = self._json(resp, "GET", url)
        if not isinstance(data, list):
            raise StoreError(f"GET {url} did not return a JSON list")
        # the service may ignore unknown filters; don't trust it
        return [r for r in data if isinstance(r, dict) and r.get(field) == value]

    def update(self, collection: str, key: str, mutate: Mutator) -> Optional[Record]:
        url = self._url(collection, key)
        for attempt in range(1, self.max_cas_attempts + 1):
            current, etag = self._fetch(collection, key)
            new = mutate(copy.deepcopy(current) if current is not None else None)
            if new is None:
                return current

            if current is None:
                headers = {"If-None-Match": "*"}
            elif etag:
                headers = {"If-Match": etag}
            else:
                raise StoreError(
                    f"{url} did not return an ETag; cannot update {collection}/{key} atomically"
                )

            resp = self._request("PUT", url, json=new, headers=headers)
            if resp.status_code == 412:
                logger.info("store_cas_conflict", collection=collection, key=key, attempt=attempt)
                continue
            if resp.status_code not in (200, 201, 204):
                raise self._fail(resp, "PUT", url)
            return new

        raise StoreConflictError(
            f"Gave up updating {collection}/{key} after {self.max_cas_attempts} conflicting writes"
        )

    def delete(self, collection: str, key: str) -> None:
        url = self._url(collection, key)
        resp = self._request("DELETE", url)
        if resp.status_code not in (200, 202, 204, 404):
            raise self._fail(resp, "DELETE", url)
