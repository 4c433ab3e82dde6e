import copy
import hashlib
import re
import time
import pytest
from qdrant_client import AsyncQdrantClient
from article_search.embeddings.provider import EmbeddingProvider
from article_search.engine import ArticleVectorSearch
from article_search.utils.config import DEFAULTS

DIMENSION = 64

_TOKEN_RE = re.compile(r"[a-z0-9]+")


class HashEmbeddingProvider(EmbeddingProvider):
  """Bag-of-words hashing provider, non-negative and L2-normalized"""

  def __init__(self, dimension=DIMENSION, delay=0.0, fail_on=None):
    self._dimension = dimension
    self.delay = delay
    self.fail_on = fail_on
    self.initialize_calls = 0
    self.embedded = []

  def initialize(self):
    self.initialize_calls += 1
    time.sleep(0.01)

  def embed(self, text):
    if self.fail_on and self.fail_on in text:
      raise RuntimeError(f"cannot embed '{text}'")
    if self.delay:
      time.sleep(self.delay)
    self.embedded.append(text)

    vector = [0.0] * self._dimension
    for token in _TOKEN_RE.findall(text.lower()):
      bucket = int(hashlib.md5(token.encode()).hexdigest(), 16) % self._dimension
      vector[bucket] += 1.0
    norm = sum(v * v for v in vector) ** 0.5
    if norm == 0:
      vector[0] = 1.0
      norm = 1.0
    return [v / norm for v in vector]

  @property
  def dimension(self):
    return self._dimension


@pytest.fixture
def config():
  cfg = copy.deepcopy(DEFAULTS)
  cfg['vector_store']['collection_name'] = 'test_articles'
  cfg['models']['embedding']['dimension'] = DIMENSION
  cfg['indexing']['show_progress'] = False
  cfg['timeouts']['embedding_seconds'] = 10
  cfg['timeouts']['store_seconds'] = 10
  return cfg


@pytest.fixture
def provider():
  return HashEmbeddingProvider()


@pytest.fixture
async def qdrant():
  client = AsyncQdrantClient(location=":memory:")
  yield client
  await client.close()


@pytest.fixture
async def engine(config, provider, qdrant):
  search = ArticleVectorSearch(config, embedding_provider=provider, client=qdrant)
  yield search
  await search.close()


@pytest.fixture
def irs_article():
  return {
    "original_link": "https://economictimes.indiatimes.com/news/international/us/taxpayers-lose-free-irs-tax-filing-service",
    "published_time": "2026-01-06T17:41:00.000Z",
    "tags": ["Tax", "IRS", "Fiscal Policy"],
    "formatted_data": {
      "title": "IRS Direct File Program Eliminated, Taxpayers Seek Alternatives for 2026",
      "introductory_paragraph": "The IRS Direct File program allowed free filing for millions.",
      "descriptive_paragraph": "<p>The program was terminated after political criticism.</p>"
    }
  }


@pytest.fixture
def tech_article():
  return {
    "original_link": "https://example.com/chips",
    "published_time": "2026-01-07T09:00:00Z",
    "tags": ["Technology", "Semiconductors"],
    "formatted_data": {
      "title": "Chipmakers ramp up AI accelerator production",
      "introductory_paragraph": "Demand for AI hardware keeps growing.",
      "descriptive_paragraph": "<div>Foundries <b>expand</b> capacity.</div>"
    }
  }


@pytest.fixture
def untagged_article():
  return {
    "original_link": "https://example.com/untagged",
    "published_time": None,
    "tags": [],
    "formatted_data": {
      "title": "Tax refunds delayed for fixed income investors",
      "introductory_paragraph": "Refund processing slowed this quarter.",
      "descriptive_paragraph": ""
    }
  }
