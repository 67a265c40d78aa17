"""
Row-wise top-k selection with a bounded min-heap.

Each row keeps a heap of its k largest ``(value, index)`` entries: the first
k elements seed the heap, and every later element replaces the root when it
is strictly larger. The root is therefore always the smallest retained
value.
"""

from __future__ import annotations

from typing import Any, List, Tuple

Entry = Tuple[Any, int]


def _sift_down(heap: List[Entry], i: int, k: int) -> None:
    while True:
        left = 2 * i + 1
        if left >= k:
            return
        right = left + 1
        smallest = right if right < k and heap[right][0] < heap[left][0] else left
        if heap[smallest][0] >= heap[i][0]:
            return
        heap[i], heap[smallest] = heap[smallest], heap[i]
        i = smallest


def topk_row(row: List[Any], k: int, sort: bool = True) -> List[Entry]:
    """
    Select the k largest entries of `row`.

    Parameters
    ----------
    row : List[Any]
        Values of one row.
    k : int
        Number of entries to keep, ``0 <= k <= len(row)``.
    sort : bool, optional
        Order the result by value, largest first. Ties keep heap order.
        When False, entries are returned in heap order.

    Returns
    -------
    List[Tuple[Any, int]]
        ``(value, position)`` pairs.
    """
    if k == 0:
        return []
    heap: List[Entry] = [(row[j], j) for j in range(k)]
    for i in range(k // 2 - 1, -1, -1):
        _sift_down(heap, i, k)
    for j in range(k, len(row)):
        if row[j] > heap[0][0]:
            heap[0] = (row[j], j)
            _sift_down(heap, 0, k)
    if sort:
        heap = sorted(heap, key=lambda entry: entry[0], reverse=True)
    return heap
