import asyncio
import httpx
import pytest
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse
from article_search.database.vector_store import CollectionExistsError, VectorStoreClient
from article_search.exceptions import OperationTimeoutError, StoreUnavailableError
from article_search.models.article import IndexedPoint
from conftest import DIMENSION

FIELDS = ("title", "summary", "tags")


@pytest.fixture
def store(qdrant):
  return VectorStoreClient(client=qdrant, url=":memory:", timeout=10)


def http_error(status_code, reason):
  return UnexpectedResponse(
    status_code=status_code,
    reason_phrase=reason,
    content=b'{"status": {"error": "collection already exists"}}',
    headers=httpx.Headers()
  )


@pytest.mark.asyncio
async def test_unreachable_server_is_store_unavailable():
  store = VectorStoreClient(url="http://127.0.0.1:1", timeout=5, http_timeout=2)
  try:
    with pytest.raises(StoreUnavailableError):
      await store.list_collections()
  finally:
    await store.close()


@pytest.mark.asyncio
async def test_transport_failure_is_store_unavailable(store, monkeypatch):
  async def refused(*args, **kwargs):
    raise ResponseHandlingException(ConnectionError("connection refused"))

  monkeypatch.setattr(store.client, "count", refused)

  with pytest.raises(StoreUnavailableError):
    await store.count("articles")


@pytest.mark.asyncio
async def test_slow_call_times_out(qdrant, monkeypatch):
  store = VectorStoreClient(client=qdrant, url=":memory:", timeout=0.05)

  async def hang(*args, **kwargs):
    await asyncio.sleep(5)

  monkeypatch.setattr(store.client, "get_collections", hang)

  with pytest.raises(OperationTimeoutError):
    await store.list_collections()


@pytest.mark.asyncio
async def test_conflict_means_collection_exists(store, monkeypatch):
  async def conflict(*args, **kwargs):
    raise http_error(409, "Conflict")

  monkeypatch.setattr(store.client, "create_collection", conflict)

  with pytest.raises(CollectionExistsError):
    await store.create_collection("articles", FIELDS, DIMENSION)


@pytest.mark.asyncio
async def test_other_http_errors_propagate(store, monkeypatch):
  async def server_error(*args, **kwargs):
    raise http_error(500, "Internal Server Error")

  monkeypatch.setattr(store.client, "create_collection", server_error)

  with pytest.raises(UnexpectedResponse) as info:
    await store.create_collection("articles", FIELDS, DIMENSION)
  assert info.value.status_code == 500


@pytest.mark.asyncio
async def test_search_returns_hits_with_payload(store):
  await store.create_collection("articles", FIELDS, 2)
  vector = [1.0, 0.0]
  await store.upsert("articles", [IndexedPoint(
    id="0b6d3c1e-1f8e-4c53-9a53-6f4f1c2a7d10",
    vectors={name: vector for name in FIELDS},
    payload={"title": "A", "link": "https://example.com/a"}
  )])

  hits = await store.search("articles", "summary", vector, limit=3)

  assert [h.id for h in hits] == ["0b6d3c1e-1f8e-4c53-9a53-6f4f1c2a7d10"]
  assert hits[0].payload["link"] == "https://example.com/a"
  assert await store.count("articles") == 1
