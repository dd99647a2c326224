"""Public package API for sweepgeom.

This facade provides a flat import surface on top of the internal
implementation package ``sweepgeom.core`` while deferring the numba-backed
batch layer until first use so ``import sweepgeom`` stays fast.

Example
-------
    from sweepgeom import point_segment_continuous_intersection, eigen_decomposition

The deeper modules (``sweepgeom.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
import logging as _logging

from importlib.metadata import version as _pkg_version, PackageNotFoundError as _NotInstalled

try:
    __version__ = _pkg_version("sweepgeom")  # populated when installed
except _NotInstalled:  # pragma: no cover - source checkout without metadata
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

# Eager light-weight submodules
_const = _imp('sweepgeom.core.constants')
_alg = _imp('sweepgeom.core.algebra')
_geom = _imp('sweepgeom.core.geometry')
_cont = _imp('sweepgeom.core.continuous')
_prim = _imp('sweepgeom.core.primitives')
_cplx = _imp('sweepgeom.core.complex_number')
_misc = _imp('sweepgeom.core.misc')
_cfg = _imp('sweepgeom.core.config')
_log = _imp('sweepgeom.core.logging_utils')


def _lazy_module(mod_name):
    class _ModuleProxy:
        __slots__ = ('_m',)

        def _load(self):
            try:
                return self._m
            except AttributeError:
                self._m = _imp(mod_name)
                return self._m

        def __getattr__(self, item):
            if item == '_m':  # unset slot, see _load
                raise AttributeError(item)
            return getattr(self._load(), item)

        def __dir__(self):
            return dir(self._load())
    return _ModuleProxy()


# Lazily loaded numba-backed batch layer
vectorized_ops = _lazy_module('sweepgeom.core.vectorized_ops')

# Vector algebra and matrix solvers
cross = _alg.cross
angle = _alg.angle
outer_product = _alg.outer_product
rotate90_ccw = _alg.rotate90_ccw
rotate90_cw = _alg.rotate90_cw
transform = _alg.transform
eigen_decomposition = _alg.eigen_decomposition
polar_unitary = _alg.polar_unitary
polar_decomposition = _alg.polar_decomposition
EigenResult = _alg.EigenResult
PolarResult = _alg.PolarResult

# Closest features and static predicates
closest_point_on_segment = _geom.closest_point_on_segment
shortest_segment_between_segments = _geom.shortest_segment_between_segments
barycentric_segment = _geom.barycentric_segment
barycentric_triangle = _geom.barycentric_triangle
ccw = _geom.ccw
is_convex_quadrilateral = _geom.is_convex_quadrilateral
point_inside_triangle = _geom.point_inside_triangle

# Swept queries
point_segment_continuous_intersection = _cont.point_segment_continuous_intersection
ContinuousHit = _cont.ContinuousHit
IntersectionCase = _cont.IntersectionCase

# Triangle primitives
triangle_signed_area = _prim.triangle_signed_area
triangle_circumcenter = _prim.triangle_circumcenter
triangle_bounding_circle = _prim.triangle_bounding_circle

Complex = _cplx.Complex
bilateral_interleaving_id = _misc.bilateral_interleaving_id
triangular_index = _misc.triangular_index
round_to = _misc.round_to

KernelConfig = _cfg.KernelConfig
get_logger = _log.get_logger
configure_logging = _log.configure_logging

# Tolerances
EPS_PARALLEL = _const.EPS_PARALLEL
FLOAT_EPSILON = _const.FLOAT_EPSILON

# Namespace submodules for exploratory users
algebra = _alg
geometry = _geom
continuous = _cont
primitives = _prim
constants = _const

__all__ = [
    '__version__',
    # algebra
    'cross', 'angle', 'outer_product', 'rotate90_ccw', 'rotate90_cw', 'transform',
    'eigen_decomposition', 'polar_unitary', 'polar_decomposition', 'EigenResult', 'PolarResult',
    # closest features / predicates
    'closest_point_on_segment', 'shortest_segment_between_segments',
    'barycentric_segment', 'barycentric_triangle', 'ccw', 'is_convex_quadrilateral',
    'point_inside_triangle',
    # swept queries
    'point_segment_continuous_intersection', 'ContinuousHit', 'IntersectionCase',
    # peripheral
    'triangle_signed_area', 'triangle_circumcenter', 'triangle_bounding_circle',
    'Complex', 'bilateral_interleaving_id', 'triangular_index', 'round_to',
    # ambient
    'KernelConfig', 'get_logger', 'configure_logging', 'EPS_PARALLEL', 'FLOAT_EPSILON',
    # submodules / namespaces
    'algebra', 'geometry', 'continuous', 'primitives', 'constants', 'vectorized_ops',
]
