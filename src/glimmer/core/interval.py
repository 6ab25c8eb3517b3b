"""Closed real intervals for hit-distance windows and color clamping.

An Interval bounds the ray parameters accepted as hits and the channel range
used when quantizing colors. ``minimum > maximum`` encodes the empty interval.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from glimmer.core.interval import interval_surrounds, make_interval
    >>> @ti.kernel
    ... def accept(t: ti.f32) -> ti.i32:
    ...     return interval_surrounds(make_interval(0.001, 100.0), t)
"""

import math

import taichi as ti
import taichi.math as tm

INFINITY = math.inf


@ti.dataclass
class Interval:
    """A closed interval of real numbers.

    Attributes:
        minimum: Lower bound of the interval.
        maximum: Upper bound of the interval.
    """

    minimum: ti.f32
    maximum: ti.f32


@ti.func
def make_interval(minimum: ti.f32, maximum: ti.f32) -> Interval:
    """Create an interval [minimum, maximum]."""
    return Interval(minimum=minimum, maximum=maximum)


@ti.func
def empty_interval() -> Interval:
    """Create the empty interval (+inf, -inf), which contains nothing."""
    return Interval(minimum=INFINITY, maximum=-INFINITY)


@ti.func
def universal_interval() -> Interval:
    """Create the interval (-inf, +inf), which contains every real."""
    return Interval(minimum=-INFINITY, maximum=INFINITY)


@ti.func
def interval_size(interval: Interval) -> ti.f32:
    """Return maximum - minimum (negative for the empty interval)."""
    return interval.maximum - interval.minimum


@ti.func
def interval_contains(interval: Interval, x: ti.f32) -> ti.i32:
    """Check minimum <= x <= maximum (bounds included)."""
    return interval.minimum <= x and x <= interval.maximum


@ti.func
def interval_surrounds(interval: Interval, x: ti.f32) -> ti.i32:
    """Check minimum < x < maximum (bounds excluded).

    Hit acceptance uses this strict form so that a root sitting exactly on
    the window boundary is rejected.
    """
    return interval.minimum < x and x < interval.maximum


@ti.func
def interval_clamp(interval: Interval, x: ti.f32) -> ti.f32:
    """Clamp x into [minimum, maximum]."""
    return tm.clamp(x, interval.minimum, interval.maximum)
