import asyncio
from typing import Any, Awaitable, List, Optional
from article_search.exceptions import OperationTimeoutError


async def run_all(*aws: Awaitable[Any]) -> List[Any]:
  """
  Run awaitables concurrently and return their results in argument order.

  The first failure cancels the others and is raised as is, not wrapped in an ExceptionGroup.
  """
  try:
    async with asyncio.TaskGroup() as tg:
      tasks = [tg.create_task(aw) for aw in aws]
  except ExceptionGroup as group:
    raise group.exceptions[0]
  return [task.result() for task in tasks]


async def with_timeout(aw: Awaitable[Any], seconds: Optional[float], what: str) -> Any:
  """Await with an optional deadline, None or 0 means wait forever"""
  if not seconds:
    return await aw
  try:
    return await asyncio.wait_for(aw, timeout=seconds)
  except TimeoutError as e:
    raise OperationTimeoutError(f"{what} did not complete within {seconds}s") from e
