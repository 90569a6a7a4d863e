#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np

from .exceptions import InvalidHorizonError


def block_hankel(x, h, start=0, ncols=None):
    """Create a block Hankel matrix with `h` block rows.

    Block row `i` holds the signal shifted `i` samples, ie. column `j` is the
    stacked window ``x[start+j], x[start+j+1], ..., x[start+j+h-1]``.

    Parameters
    ----------
    x : ndarray(ns,d)
        signal, time first
    h : int
        number of block rows (horizon)
    start : int, optional
        first sample used
    ncols : int, optional
        number of block columns. Default is as many as the signal allows,
        ``ns - start - h + 1``

    Returns
    -------
    H : ndarray(h*d, ncols)

    Examples
    --------
    >>> block_hankel(np.arange(5)[:,None], 3)
    array([[0., 1., 2.],
           [1., 2., 3.],
           [2., 3., 4.]])
    """
    x = np.asarray(x, dtype=float)
    if x.ndim == 1:
        x = x[:,None]
    ns, d = x.shape
    if h <= 0:
        raise InvalidHorizonError(f'Horizon must be positive. Is {h}')
    if start < 0:
        raise InvalidHorizonError(f'Start sample must be >= 0. Is {start}')
    avail = ns - start - h + 1
    if ncols is None:
        ncols = avail
    if ncols <= 0 or ncols > avail:
        raise InvalidHorizonError(f'Not enough samples for horizon {h}: '
                                  f'{ns} samples, start {start}, '
                                  f'{ncols} columns requested')

    H = np.empty((h*d, ncols))
    for i in range(h):
        H[i*d:(i+1)*d] = x[start+i:start+i+ncols].T
    return H

def default_horizons(ns, nx, r=None, s1=None, s2=None, margin=10):
    """Fill in the horizons not given.

    The future horizon is ``r = nx + margin``. For automatic order selection
    the order is not known and ``r = min(ns//20, 20)`` is used. The past
    horizons default to `r`.
    """
    if r is None:
        if nx == 'auto':
            r = max(min(ns // 20, 20), 2)
        else:
            r = nx + margin
    if s1 is None:
        s1 = r
    if s2 is None:
        s2 = r
    for name, val in (('r', r), ('s1', s1), ('s2', s2)):
        if int(val) != val or val <= 0:
            raise InvalidHorizonError(f'{name} must be a positive integer. '
                                      f'Is {val}')
    if ns < max(s1, s2) + r:
        raise InvalidHorizonError(f'Too few samples ({ns}) for horizons '
                                  f'r={r}, s1={s1}, s2={s2}')
    return int(r), int(s1), int(s2)
