import json
from unittest.mock import MagicMock

import pytest
import requests

from opportunity_matcher.errors import StoreConflictError, StoreError
from opportunity_matcher.store.http import HttpRecordStore
from opportunity_matcher.store.json_file import JsonFileRecordStore
from opportunity_matcher.store.memory import MemoryRecordStore


@pytest.fixture(params=["memory", "json"])
def local_store(request, tmp_path):
    if request.param == "memory":
        return MemoryRecordStore()
    return JsonFileRecordStore(tmp_path)


def test_put_get_and_merge(local_store):
    local_store.put("things", "k1", {"a": 1, "b": 2})
    local_store.put("things", "k1", {"b": 3}, merge=True)

    assert local_store.get("things", "k1") == {"a": 1, "b": 3}

    local_store.put("things", "k1", {"c": 4})
    assert local_store.get("things", "k1") == {"c": 4}


def test_get_missing_is_none(local_store):
    assert local_store.get("things", "nope") is None


def test_query_by_field(local_store):
    local_store.put("things", "k1", {"kind": "x", "n": 1})
    local_store.put("things", "k2", {"kind": "y", "n": 2})
    local_store.put("things", "k3", {"kind": "x", "n": 3})

    found = local_store.query_by_field("things", "kind", "x")

    assert sorted(r["n"] for r in found) == [1, 3]
    assert local_store.query_by_field("other", "kind", "x") == []


def test_update_can_create_modify_or_leave_alone(local_store):
    created = local_store.update("things", "k1", lambda cur: {"n": 1} if cur is None else None)
    assert created == {"n": 1}

    bumped = local_store.update("things", "k1", lambda cur: {"n": cur["n"] + 1})
    assert bumped == {"n": 2}

    untouched = local_store.update("things", "k1", lambda cur: None)
    assert untouched == {"n": 2}

    assert local_store.update("things", "missing", lambda cur: None) is None


def test_delete(local_store):
    local_store.put("things", "k1", {"n": 1})
    local_store.delete("things", "k1")
    local_store.delete("things", "k1")

    assert local_store.get("things", "k1") is None


def test_memory_store_hands_out_copies():
    store = MemoryRecordStore()
    store.put("things", "k1", {"tags": [1]})

    store.get("things", "k1")["tags"].append(2)

    assert store.get("things", "k1") == {"tags": [1]}


def test_json_store_layout(tmp_path):
    store = JsonFileRecordStore(tmp_path)
    store.put("applications", "opp1_stu1", {"status": "applied"})

    path = tmp_path / "applications" / "opp1_stu1.json"
    assert json.loads(path.read_text(encoding="utf-8")) == {"status": "applied"}
    assert not (tmp_path / "applications" / "opp1_stu1.json.tmp").exists()


def test_json_store_rejects_path_like_keys(tmp_path):
    store = JsonFileRecordStore(tmp_path)

    with pytest.raises(ValueError):
        store.get("applications", "../escape")


def test_json_store_corrupt_record_raises(tmp_path):
    folder = tmp_path / "things"
    folder.mkdir()
    (folder / "k1.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(StoreError):
        JsonFileRecordStore(tmp_path).get("things", "k1")


# ----------------------------
# HTTP store
# ----------------------------


class FakeResponse:
    def __init__(self, status_code, payload=None, headers=None):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self.text = json.dumps(payload) if payload is not None else ""

    def json(self):
        if self._payload is None:
            raise ValueError("no body")
        return self._payload


def _http_store(*responses):
    session = MagicMock()
    session.headers = {}
    session.request.side_effect = list(responses)
    return HttpRecordStore("https://docs.example.test/v1/", session=session), session


def test_http_get_found_and_missing():
    store, session = _http_store(FakeResponse(200, {"a": 1}), FakeResponse(404))

    assert store.get("things", "k 1") == {"a": 1}
    assert store.get("things", "k2") is None

    method, url = session.request.call_args_list[0].args
    assert method == "GET"
    assert url == "https://docs.example.test/v1/things/k%201"


def test_http_update_creates_with_if_none_match():
    store, session = _http_store(FakeResponse(404), FakeResponse(201, {}))

    record = store.update("things", "k1", lambda cur: {"n": 1})

    assert record == {"n": 1}
    put = session.request.call_args_list[1]
    assert put.args[0] == "PUT"
    assert put.kwargs["headers"] == {"If-None-Match": "*"}
    assert put.kwargs["json"] == {"n": 1}


def test_http_update_retries_lost_compare_and_swap():
    store, session = _http_store(
        FakeResponse(200, {"n": 1}, {"ETag": '"v1"'}),
        FakeResponse(412),
        FakeResponse(200, {"n": 5}, {"ETag": '"v2"'}),
        FakeResponse(200, {}),
    )

    record = store.update("things", "k1", lambda cur: {"n": cur["n"] + 1})

    assert record == {"n": 6}
    assert session.request.call_args_list[1].kwargs["headers"] == {"If-Match": '"v1"'}
    assert session.request.call_args_list[3].kwargs["headers"] == {"If-Match": '"v2"'}


def test_http_update_gives_up_after_max_attempts():
    responses = []
    for _ in range(2):
        responses += [FakeResponse(200, {"n": 1}, {"ETag": '"v"'}), FakeResponse(412)]
    store, _ = _http_store(*responses)
    store.max_cas_attempts = 2

    with pytest.raises(StoreConflictError):
        store.update("things", "k1", lambda cur: {"n": 2})


def test_http_transport_errors_are_not_retried():
    store, session = _http_store(requests.ConnectionError("boom"))

    with pytest.raises(StoreError):
        store.get("things", "k1")

    assert session.request.call_count == 1


def test_http_server_errors_raise():
    store, _ = _http_store(FakeResponse(503, {"error": "down"}))

    with pytest.raises(StoreError):
        store.put("things", "k1", {"n": 1})


def test_http_query_filters_response():
    store, session = _http_store(
        FakeResponse(200, [{"kind": "x", "n": 1}, {"kind": "y", "n": 2}])
    )

    assert store.query_by_field("things", "kind", "x") == [{"kind": "x", "n": 1}]
    assert session.request.call_args.kwargs["params"] == {"kind": "x"}


def test_http_delete_tolerates_missing():
    store, _ = _http_store(FakeResponse(404))

    store.delete("things", "k1")


def test_http_update_refuses_record_without_etag():
    store, session = _http_store(FakeResponse(200, {"n": 1}))

    with pytest.raises(StoreError, match="ETag"):
        store.update("things", "k1", lambda cur: {"n": cur["n"] + 1})

    assert session.request.call_count == 1
