class ArticleSearchError(Exception):
  """Base class for article search failures"""


class ProviderInitializationError(ArticleSearchError):
  """The embedding model could not be loaded"""


class EmbeddingError(ArticleSearchError):
  """A single text could not be embedded"""


class StoreUnavailableError(ArticleSearchError):
  """The vector database cannot be reached"""


class SchemaMismatchError(ArticleSearchError):
  """Collection named vectors disagree with the configured embedding model"""


class OperationTimeoutError(ArticleSearchError):
  """An embedding or vector store call did not complete in time"""
