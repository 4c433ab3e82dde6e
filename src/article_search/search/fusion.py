import math
from typing import Any, Dict, List, Optional
from article_search.models.article import FieldScores, FusedResult, SearchHit, FIELD_NAMES

DEFAULT_WEIGHTS = {"summary": 0.5, "title": 0.3, "tags": 0.2}


class ScoreFusion:
  """
  Merge the per-field result sets into one relevance score per document.

  overall = w_summary * summary + w_title * title + w_tags * tags

  A document missing from a field's results scores 0 for that field. The output keeps the
  order in which documents were first seen (title results, then summary, then tags) unless
  sort_by_overall is set.

  Field scores keep the raw similarity. Only the weighted sum clamps them to [0, 1].
  """

  def __init__(self, weights: Optional[Dict[str, float]] = None, sort_by_overall: bool = False):
    weights = dict(weights or DEFAULT_WEIGHTS)

    if set(weights) != set(FIELD_NAMES):
      raise ValueError(f"Fusion weights must be given for {FIELD_NAMES}, got {sorted(weights)}")
    if any(w < 0 for w in weights.values()):
      raise ValueError("Fusion weights must be non-negative")
    if not math.isclose(sum(weights.values()), 1.0, abs_tol=1e-9):
      raise ValueError(f"Fusion weights must sum to 1.0, got {sum(weights.values())}")

    self.weights = weights
    self.sort_by_overall = sort_by_overall

  def overall(self, scores: FieldScores) -> float:
    # Cosine may fall outside [0, 1], the weighted sum uses the clamped value
    return sum(
      self.weights[name] * min(max(getattr(scores, name), 0.0), 1.0)
      for name in FIELD_NAMES
    )

  def fuse(
      self,
      title_results: List[SearchHit],
      summary_results: List[SearchHit],
      tag_results: List[SearchHit]) -> List[FusedResult]:
    merged: Dict[str, Dict[str, Any]] = {}

    for name, results in zip(FIELD_NAMES, (title_results, summary_results, tag_results)):
      for hit in results:
        entry = merged.setdefault(hit.id, {"payload": hit.payload, "scores": FieldScores()})
        setattr(entry["scores"], name, hit.score)

    fused = [
      FusedResult(
        id = doc_id,
        title = entry["payload"].get("title", ""),
        link = entry["payload"].get("link", ""),
        scores = entry["scores"],
        overall = self.overall(entry["scores"])
      )
      for doc_id, entry in merged.items()
    ]

    if self.sort_by_overall:
      fused.sort(key=lambda r: r.overall, reverse=True)
    return fused
