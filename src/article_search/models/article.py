import re
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field
from bs4 import BeautifulSoup

FIELD_NAMES = ("title", "summary", "tags")

_WHITESPACE_RE = re.compile(r"\s+")


def strip_markup(html: str) -> str:
  """Remove HTML tags and collapse whitespace"""
  if not html:
    return ""
  text = BeautifulSoup(html, "html.parser").get_text(separator=" ")
  return _WHITESPACE_RE.sub(" ", text).strip()


@dataclass(frozen=True)
class Article:
  """Source article, immutable once loaded"""
  original_link: str
  published_time: Optional[str]
  tags: List[str]
  title: str
  introductory_paragraph: str = ""
  descriptive_paragraph: str = ""

  @classmethod
  def from_dict(cls, data: Dict[str, Any]) -> 'Article':
    """Create Article from the source JSON record"""
    formatted = data.get('formatted_data') or {}
    return cls(
      original_link = data.get('original_link', ''),
      published_time = data.get('published_time'),
      tags = [str(t) for t in (data.get('tags') or [])],
      title = formatted.get('title') or '',
      introductory_paragraph = formatted.get('introductory_paragraph') or '',
      descriptive_paragraph = formatted.get('descriptive_paragraph') or ''
    )


@dataclass(frozen=True)
class FieldText:
  """The three texts embedded for an article"""
  title: str
  summary: str
  tags: str

  @classmethod
  def from_article(cls, article: Article, tags_delimiter: str = ", ") -> 'FieldText':
    summary = f"{article.introductory_paragraph} {strip_markup(article.descriptive_paragraph)}"
    return cls(
      title = article.title,
      summary = summary.strip(),
      tags = tags_delimiter.join(article.tags)
    )


@dataclass
class IndexedPoint:
  """Point ready to be upserted in the vector store"""
  id: str
  vectors: Dict[str, List[float]]
  payload: Dict[str, Any]


@dataclass
class IndexReport:
  """Outcome of an indexing run"""
  indexed: int = 0
  failed: List[str] = field(default_factory=list)


@dataclass
class SearchHit:
  """One nearest-neighbor match returned by the vector store"""
  id: str
  score: float
  payload: Dict[str, Any]


@dataclass
class FieldScores:
  """Per-field similarity of a document, 0 when the field did not match"""
  title: float = 0.0
  summary: float = 0.0
  tags: float = 0.0


def format_percentage(score: float) -> str:
  return f"{score * 100:.2f}%"


@dataclass
class FusedResult:
  """Document with its per-field and overall relevance"""
  id: str
  title: str
  link: str
  scores: FieldScores
  overall: float

  def relevance(self) -> Dict[str, str]:
    return {
      "title": format_percentage(self.scores.title),
      "summary": format_percentage(self.scores.summary),
      "tags": format_percentage(self.scores.tags),
      "overall": format_percentage(self.overall)
    }

  def to_dict(self) -> Dict[str, Any]:
    """Convert to the published result shape"""
    return {
      "article_title": self.title,
      "article_link": self.link,
      "relevance": self.relevance()
    }
