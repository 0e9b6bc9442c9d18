"""Manifold descriptions used to place new vertices during refinement"""
from abc import ABC, abstractmethod

import numpy


class Manifold(ABC):
    """Base class for the geometry attached to the lines of a triangulation.

    When a line carrying a manifold id is bisected during refinement, the
    new vertex is computed by the manifold registered under that id
    instead of the straight-line midpoint.
    """

    @abstractmethod
    def get_midpoints(self, p, q):
        """
        Return the points halfway between the rows of ``p`` and ``q``.

        :param p: array of shape (n, dim), first end points
        :param q: array of shape (n, dim), second end points
        :return: array of shape (n, dim)
        """
        raise NotImplementedError("This method is only implemented with an "
                                  "associated child of the base class.")

    def get_midpoint(self, p, q):
        return self.get_midpoints(numpy.atleast_2d(p),
                                  numpy.atleast_2d(q))[0]

    def shifted(self, offset):
        """The manifold after translating the mesh by ``offset``."""
        return self

    def scaled(self, factor):
        """The manifold after scaling the mesh about the origin."""
        return self


class FlatManifold(Manifold):
    """Straight lines; the midpoint is the arithmetic mean."""

    def get_midpoints(self, p, q):
        return 0.5 * (numpy.asarray(p, dtype=float)
                      + numpy.asarray(q, dtype=float))

    def __repr__(self):
        return "FlatManifold()"


class PolarManifold(Manifold):
    """Circles about ``center`` in the plane of the first two coordinates.

    The midpoint of two points lies on the bisector of their polar angles
    at the mean of their radii, so a line on a circle stays on the circle.
    Any further coordinates are averaged.
    """

    def __init__(self, center=(0.0, 0.0)):
        self.center = numpy.asarray(center, dtype=float)

    def get_midpoints(self, p, q):
        p = numpy.asarray(p, dtype=float)
        q = numpy.asarray(q, dtype=float)
        mid = 0.5 * (p + q)

        c = self.center[:2]
        dp = p[:, :2] - c
        dq = q[:, :2] - c
        rp = numpy.linalg.norm(dp, axis=1)
        rq = numpy.linalg.norm(dq, axis=1)
        if numpy.any(rp == 0.0) or numpy.any(rq == 0.0):
            raise ValueError("PolarManifold is undefined at its center "
                             f"{tuple(self.center)}")

        # Bisector of the two polar angles
        bisector = dp / rp[:, None] + dq / rq[:, None]
        norm = numpy.linalg.norm(bisector, axis=1)
        if numpy.any(norm < 1e-12):
            raise ValueError("Cannot bisect diametrically opposite points "
                             "on a PolarManifold")
        radius = 0.5 * (rp + rq)
        mid[:, :2] = c + bisector / norm[:, None] * radius[:, None]
        return mid

    def shifted(self, offset):
        offset = numpy.asarray(offset, dtype=float)
        return PolarManifold(self.center + offset[:len(self.center)])

    def scaled(self, factor):
        return PolarManifold(self.center * factor)

    def __repr__(self):
        return f"PolarManifold(center={tuple(self.center)})"
