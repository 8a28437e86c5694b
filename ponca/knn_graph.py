"""K-nearest-neighbor graph over a point cloud, with range queries."""

from __future__ import annotations

from typing import Iterator, Sequence

import numpy as np


def _positions(points) -> np.ndarray:
    items = list(points)
    if not items:
        return np.zeros((0, 0))
    rows = [np.asarray(getattr(item, "pos", item), dtype=float) for item in items]
    return np.vstack(rows)


class KnnGraph:
    """Graph linking each point to its k nearest other points.

    Range queries grow a region through the graph, restricted to the
    Euclidean ball around the query point.
    """

    def __init__(self, points, k: int) -> None:
        if k < 0:
            raise ValueError("k must be non-negative")
        self._points = _positions(points)
        n = self._points.shape[0]
        self._k = min(int(k), max(n - 1, 0))
        if n == 0 or self._k == 0:
            self._indices = np.zeros(0, dtype=int)
        else:
            diff = self._points[:, None, :] - self._points[None, :, :]
            dist2 = np.einsum("ijk,ijk->ij", diff, diff)
            np.fill_diagonal(dist2, np.inf)
            order = np.argsort(dist2, axis=1, kind="stable")[:, : self._k]
            self._indices = order.reshape(-1).astype(int)
        self._indices.setflags(write=False)

    @property
    def points(self) -> np.ndarray:
        """Positions of the points, one per row."""
        return self._points

    def k(self) -> int:
        """Number of neighbors stored for each point."""
        return self._k

    def size(self) -> int:
        """Number of points in the graph."""
        return int(self._points.shape[0])

    def index_data(self) -> np.ndarray:
        """Flat, read-only array of the neighbor indices of every point."""
        return self._indices

    def _check_index(self, index: int) -> int:
        index = int(index)
        if not 0 <= index < self.size():
            raise IndexError(f"point index {index} out of range")
        return index

    def k_nearest_neighbors(self, index: int) -> list[int]:
        """Indices of the k nearest neighbors of a point, closest first."""
        index = self._check_index(index)
        start = index * self._k
        return [int(i) for i in self._indices[start : start + self._k]]

    def range_neighbors(self, index: int, radius: float) -> Iterator[int]:
        """Points reachable through the graph within radius of a point.

        The query point itself is not included.
        """
        index = self._check_index(index)
        return self._range_walk(index, float(radius) ** 2)

    def _range_walk(self, index: int, squared_radius: float) -> Iterator[int]:
        center = self._points[index]
        visited = {index}
        stack: list[int] = [index]
        while stack:
            current = stack.pop()
            for nei in self.k_nearest_neighbors(current):
                offset = center - self._points[nei]
                if float(offset @ offset) < squared_radius and nei not in visited:
                    visited.add(nei)
                    stack.append(nei)
            if current != index:
                yield current

    def __len__(self) -> int:
        return self.size()

    @classmethod
    def from_positions(cls, positions: Sequence, k: int) -> "KnnGraph":
        """Build a graph from a sequence of positions."""
        return cls(positions, k)