"""Weighting, algebraic sphere fitting, curvature storage, MLS projection and knn-graph queries for point clouds."""

__version__ = "1.0.0"

__all__ = [
    "weight_func",
    "sylvester",
    "algebraic_sphere",
    "sphere_fit",
    "curvature",
    "mls_projection",
    "knn_graph",
]