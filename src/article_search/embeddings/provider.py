from abc import ABC, abstractmethod
from typing import List, Optional
from sentence_transformers import SentenceTransformer
from sentence_transformers.sentence_transformer.modules import Normalize, Pooling, Transformer
from article_search.exceptions import EmbeddingError, ProviderInitializationError
from article_search.utils.logger import logger


class EmbeddingProvider(ABC):
  """Base class for embedding providers"""

  @abstractmethod
  def initialize(self) -> None:
    """Load the model, called once before the first embed"""
    pass

  @abstractmethod
  def embed(self, text: str) -> List[float]:
    """Generate embedding for a single text"""
    pass

  @property
  @abstractmethod
  def dimension(self) -> int:
    """Length of the produced vectors"""
    pass


class SentenceTransformerProvider(EmbeddingProvider):
  """Local sentence-transformers model"""

  def __init__(
    self,
    model_name: str,
    pooling: Optional[str] = "mean",
    normalize: bool = True,
    cache_dir: Optional[str] = None,
    local_files_only: bool = False,
    device: str = "cpu"
  ):
    self.model_name = model_name
    self.pooling = pooling
    self.normalize = normalize
    self.cache_dir = cache_dir
    self.local_files_only = local_files_only
    self.device = device
    self.model = None

  @classmethod
  def from_config(cls, embedding_config: dict) -> 'SentenceTransformerProvider':
    return cls(
      model_name = embedding_config['model_name'],
      pooling = embedding_config.get('pooling'),
      normalize = embedding_config.get('normalize', True),
      cache_dir = embedding_config.get('cache_dir'),
      local_files_only = embedding_config.get('local_files_only', False),
      device = embedding_config.get('device', 'cpu')
    )

  def _build_model(self) -> SentenceTransformer:
    if not self.pooling:
      return SentenceTransformer(
        self.model_name,
        device=self.device,
        cache_folder=self.cache_dir,
        local_files_only=self.local_files_only
      )

    # Explicit module stack so the pooling strategy is the configured one
    hub_kwargs = {'local_files_only': self.local_files_only, 'cache_dir': self.cache_dir}
    transformer = Transformer(
      self.model_name,
      model_kwargs=dict(hub_kwargs),
      processor_kwargs=dict(hub_kwargs),
      config_kwargs=dict(hub_kwargs)
    )
    modules = [
      transformer,
      Pooling(transformer.get_embedding_dimension(), pooling_mode=self.pooling)
    ]
    if self.normalize:
      modules.append(Normalize())
    return SentenceTransformer(modules=modules, device=self.device)

  def initialize(self) -> None:
    if self.model is not None:
      return

    logger.info(f"Loading embedding model: {self.model_name}")
    try:
      self.model = self._build_model()
    except Exception as e:
      logger.error(f"✗ Embedding model {self.model_name} could not be loaded: {e}")
      raise ProviderInitializationError(f"Cannot load {self.model_name}: {e}") from e
    logger.info(f"✓ {self.model_name} loaded")

  def embed(self, text: str) -> List[float]:
    if self.model is None:
      raise ProviderInitializationError("Embedding model not initialized")
    try:
      embedding = self.model.encode(
        text,
        convert_to_tensor=False,
        normalize_embeddings=self.normalize
      )
    except Exception as e:
      raise EmbeddingError(f"Embedding failed: {e}") from e
    return embedding.tolist()

  @property
  def dimension(self) -> int:
    if self.model is None:
      raise ProviderInitializationError("Embedding model not initialized")
    return self.model.get_embedding_dimension()
