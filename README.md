# ponca

Local geometric analysis of point clouds with NumPy: distance-based
weighting, the algebraic sphere primitive and its Pratt-constrained fit,
principal curvature storage, quasi-orthogonal MLS projection and range
queries over a k-nearest-neighbour graph.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `ponca.weight_func`: `DistWeightFunc(kernel, t, basis_center=None)` weights
  a query by its distance to a basis center, zero beyond the support `t`.
  `w(q)` returns a `WeightReturn(weight, local_q)`. `spacedw`, `spaced2w`,
  `scaledw`, `scaled2w` and `scale_spaced2w` give derivatives with respect to
  space and scale; they need a kernel with `df` (and `ddf`) and the flags
  `is_d_valid` (and `is_dd_valid`) set, and raise `TypeError` otherwise.
  `VarifoldWeightKernel` is the one kernel shipped; any object with a method
  `f(x)` can serve as a kernel.
- `ponca.sylvester`: solvers for `AX + XA = C` with symmetric `A`:
  `solve_diagonal_sylvester`, `solve_symmetric_sylvester` (by
  eigendecomposition) and `solve_symmetric_sylvester_2` (a 6x6 linear system,
  3x3 only; other sizes give a zero matrix).
- `ponca.algebraic_sphere`: `AlgebraicSphere`, the scalar field
  `uc + ul·x + uq |x|²` stored in a local basis, with `potential`, `project`
  (closed form), `project_descent`, `primitive_gradient`, `hessian`, `radius`,
  `center`, `change_basis` and Pratt normalisation. `FitResult` is the status
  of a fit: `STABLE`, `UNSTABLE`, `UNDEFINED`, `NEED_OTHER_PASS`,
  `CONFLICT_ERROR_FOUND`.
- `ponca.sphere_fit`: `SphereFit`, an `AlgebraicSphere` fitted to points
  without normals by solving a generalised eigenvalue problem. Points may be
  arrays or objects with a `pos` attribute.
- `ponca.curvature`: `CurvatureEstimator`, which stores principal curvatures
  and their 3D directions, swapping them so that `kmin <= kmax`, and gives
  `k_mean` and `gaussian_curvature`.
- `ponca.mls_projection`: `QuasiOrthogonalMLSProjection`, which repeatedly
  fits around a moving point and projects onto the fit until the displacement
  is below `conv_ratio * scale`, then runs a final fit kept in `fit_final`.
  `project_oriented` also carries a normal from step to step, and needs fits
  whose `init` takes a position and a normal.
- `ponca.knn_graph`: `KnnGraph(points, k)` with `k_nearest_neighbors(index)`
  (closest first) and `range_neighbors(index, radius)`, a region grown through
  the graph inside the ball around the query point, the query point excluded.

## Example

```python
import numpy as np
from ponca.weight_func import DistWeightFunc
from ponca.sphere_fit import SphereFit


class SmoothKernel:
    def f(self, x):
        return (x * x - 1.0) ** 2


rng = np.random.default_rng(0)
dirs = rng.normal(size=(500, 3))
dirs /= np.linalg.norm(dirs, axis=1, keepdims=True)
points = 2.0 * dirs + np.array([1.0, 2.0, 3.0])

fit = SphereFit()
fit.set_weight_func(DistWeightFunc(SmoothKernel(), 10.0))
fit.init(points[0])
fit.compute(points)

if fit.is_stable():
    print(fit.radius(), fit.center())
```

Range queries on a k-nearest-neighbour graph:

```python
from ponca.knn_graph import KnnGraph

graph = KnnGraph(points, 10)
neighbours = list(graph.range_neighbors(0, 0.5))
```

## What is not included

- The only fitting procedure is `SphereFit`. There are no fits using normals
  and no plane fits; `QuasiOrthogonalMLSProjection` and `CurvatureEstimator`
  work with whatever fit or values the caller provides.
- The only kernel shipped is `VarifoldWeightKernel`, and it has no
  derivatives; derivative weights need a kernel supplied by the caller.
- There is no kd-tree. `KnnGraph` finds neighbours by comparing every pair of
  points, which suits moderate point counts.