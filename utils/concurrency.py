"""
Concurrent fetch helpers
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Tuple, Type

from config import settings
from utils.logging_config import logger


def run_parallel(*calls: Callable[[], Any]) -> List[Any]:
    """
    Run independent calls concurrently and return their results in order.
    The first exception (in call order) propagates once all calls finish.
    """
    if not calls:
        return []
    workers = min(len(calls), settings.MAX_PARALLEL_REQUESTS)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(call) for call in calls]
    return [future.result() for future in futures]


def run_parallel_settled(
    *calls: Tuple[Callable[[], Any], Any],
    errors: Tuple[Type[BaseException], ...] = (Exception,),
    passthrough: Tuple[Type[BaseException], ...] = (),
) -> List[Any]:
    """
    Run (call, default) pairs concurrently; a call raising one of `errors`
    yields its default instead of failing the batch.
    Exceptions outside `errors`, or matching `passthrough`, propagate as in run_parallel.
    """
    if not calls:
        return []
    workers = min(len(calls), settings.MAX_PARALLEL_REQUESTS)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(call) for call, _ in calls]

    results = []
    for future, (_, default) in zip(futures, calls):
        try:
            results.append(future.result())
        except errors as e:
            if passthrough and isinstance(e, passthrough):
                raise
            logger.warning(f"Concurrent call failed, using default: {e}")
            results.append(default)
    return results
