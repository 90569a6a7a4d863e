#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np

from .common import atleast_2d_time


class TimeSeriesData():
    """Measured input/output data of a discrete-time system.

    Signals are stored time first, ie. ``y[k]`` is the output vector at sample
    `k`. The object is immutable; the stored arrays are read-only copies.

    Parameters
    ----------
    y : ndarray(ns,p) or ndarray(ns)
        measured outputs
    u : ndarray(ns,m) or ndarray(ns)
        measured inputs
    dt : float, optional
        sample period. Default is unit sampling.

    Examples
    --------
    >>> data = TimeSeriesData(y, u, dt=0.01)
    >>> data.p, data.m, len(data)
    (1, 1, 1000)
    """

    def __init__(self, y, u, dt=1):
        y = atleast_2d_time(y).copy()
        u = atleast_2d_time(u).copy()
        if y.shape[0] != u.shape[0]:
            raise ValueError('y and u must have the same number of samples, '
                             f'{y.shape[0]} != {u.shape[0]}')
        if not np.isscalar(dt) or dt <= 0:
            raise ValueError(f'dt must be a positive scalar. Is {dt}')
        y.setflags(write=False)
        u.setflags(write=False)

        self._y = y
        self._u = u
        self._dt = float(dt)
        self.ns, self.p = y.shape
        self.m = u.shape[1]
        self._frozen = True

    def __setattr__(self, name, value):
        if getattr(self, '_frozen', False):
            raise AttributeError(f'{self.__class__.__name__} is immutable')
        super().__setattr__(name, value)

    def __len__(self):
        return self.ns

    def __repr__(self):
        return (f'{self.__class__.__name__}(ns={self.ns}, p={self.p}, '
                f'm={self.m}, dt={self.dt})')

    @property
    def y(self):
        """Output signals, ndarray(ns,p)"""
        return self._y

    @property
    def u(self):
        """Input signals, ndarray(ns,m)"""
        return self._u

    @property
    def dt(self):
        return self._dt

    @property
    def fs(self):
        return 1/self._dt

    @property
    def ny(self):
        return self.p

    @property
    def nu(self):
        return self.m
