"""
포크-조인 병렬 map
==================

독립적인 인덱스 구간에 대한 순수 함수 map을 프로세스 풀에서 실행한다.

  1. 입력을 연속된 청크로 나눈다 (워커당 약 2개).
  2. 각 청크를 독립적으로 계산한다. 청크끼리 상태를 공유하지 않는다.
  3. 결과를 원래 인덱스 순서대로 이어 붙인다.

위치가 곧 의미(계수/평가 인덱스)이므로 스케줄링 순서와 무관하게
출력 순서는 입력 순서와 같다.

func는 피클 가능해야 한다: 모듈 수준 함수 또는 그 functools.partial.
입력이 PARALLEL_MIN_ITEMS보다 작거나 워커가 1이면 현재 프로세스에서 실행한다.
"""

import itertools
import logging
from concurrent.futures import ProcessPoolExecutor

from zkp.kzg.config import PARALLEL_MIN_ITEMS, default_workers

logger = logging.getLogger(__name__)


def chunk_ranges(count, chunks):
    """[0, count)를 최대 chunks개의 연속 구간 (start, stop)으로 나눈다."""
    if count <= 0:
        return []
    chunks = max(1, min(chunks, count))
    size, extra = divmod(count, chunks)
    ranges = []
    start = 0
    for i in range(chunks):
        stop = start + size + (1 if i < extra else 0)
        ranges.append((start, stop))
        start = stop
    return ranges


def _map_chunk(func, chunk):
    return [func(item) for item in chunk]


def _range_chunk(func, bounds):
    return func(*bounds)


def parallel_map(func, items, workers=None, min_items=None):
    """func를 items의 각 원소에 적용한 리스트를 반환한다 (순서 보존).

    Args:
        func: 피클 가능한 단일 인자 함수
        items: 입력 시퀀스
        workers: 최대 워커 수 (None이면 default_workers())
        min_items: 이 개수 미만이면 순차 실행 (None이면 PARALLEL_MIN_ITEMS)
    """
    items = list(items)
    workers = default_workers() if workers is None else workers
    min_items = PARALLEL_MIN_ITEMS if min_items is None else min_items
    if workers <= 1 or len(items) < min_items:
        return [func(item) for item in items]

    chunks = [items[start:stop] for start, stop in chunk_ranges(len(items), 2 * workers)]
    logger.debug("parallel_map: %d items, %d chunks, %d workers", len(items), len(chunks), workers)
    with ProcessPoolExecutor(max_workers=workers) as executor:
        results = executor.map(_map_chunk, itertools.repeat(func), chunks)
        return list(itertools.chain.from_iterable(results))


def parallel_ranges(func, count, workers=None, min_items=None):
    """인덱스 구간 [0, count)를 나누어 func(start, stop)을 실행하고 결과를 잇는다.

    func(start, stop)은 인덱스 start..stop-1에 대한 결과 리스트를 반환해야 한다.
    """
    workers = default_workers() if workers is None else workers
    min_items = PARALLEL_MIN_ITEMS if min_items is None else min_items
    if workers <= 1 or count < min_items:
        return list(func(0, count)) if count > 0 else []

    ranges = chunk_ranges(count, 2 * workers)
    logger.debug("parallel_ranges: %d indices, %d chunks, %d workers", count, len(ranges), workers)
    with ProcessPoolExecutor(max_workers=workers) as executor:
        results = executor.map(_range_chunk, itertools.repeat(func), ranges)
        return list(itertools.chain.from_iterable(results))
