#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Observer/Kalman filter identification (OKID)

Estimate the Markov parameters (impulse response) of a system from arbitrary
input/output data. An observer with gain G gives the ARX like representation

y(t) = D u(t) + ∑ᵢ Ȳᵢ [u(t-i); y(t-i)],  i = 1..l

where the observer Markov parameters ``Ȳᵢ = C Ā^(i-1) [B+GD, -G]`` decay
fast, as ``Ā = A+GC`` can be deadbeat. The system Markov parameters are then
recovered recursively from the observer ones.

See :cite:juang1993 (Applied System Identification, J.-N. Juang, 1994)
"""

import numpy as np

from .common import lstsq_solve
from .exceptions import InvalidHorizonError


def okid(data, length, lstsq_fn=None):
    """Markov parameters from input/output data.

    Parameters
    ----------
    data : TimeSeriesData
    length : int
        Number of Markov parameters to estimate, including ``Y[0] = D``. This
        is also the number of past samples used in the observer regression.
        Should be less than half the number of samples; too many parameters
        can give spurious oscillations.
    lstsq_fn : callable, optional
        ``X = lstsq_fn(A, B)`` minimizing ``||A@X - B||``

    Returns
    -------
    Y : ndarray(length,p,m)
        Markov parameters. ``Y[0] = D`` and ``Y[k] = C A^(k-1) B``

    Raises
    ------
    InvalidHorizonError
        if ``length <= 0`` or ``length >= ns``

    Notes
    -----
    For best results the data should have a tail with zero input, otherwise
    the Markov parameters might grow at large times.
    """
    lstsq_fn = lstsq_solve if lstsq_fn is None else lstsq_fn
    y, u = data.y, data.u
    ns, p = y.shape
    m = u.shape[1]
    if int(length) != length or not 0 < length < ns:
        raise InvalidHorizonError(f'length must be an integer with '
                                  f'0 < length < ns={ns}. Is {length}')
    length = int(length)

    # regressor matrix, rows u(t), [u(t-1); y(t-1)], ... [u(t-l); y(t-l)]
    q = m + p
    uy = np.hstack((u, y)).T
    V = np.zeros((m + q*length, ns))
    V[:m] = u.T
    for i in range(1, length+1):
        V[m+(i-1)*q:m+i*q, i:] = uy[:,:ns-i]

    # y = Ybar V  <=>  yᵀ = Vᵀ Ybarᵀ
    Ybar = lstsq_fn(V.T, y).T

    D = Ybar[:,:m]
    # observer Markov parameters split in the u and y parts
    Yu = [Ybar[:, m+i*q:m+i*q+m] for i in range(length)]
    Yy = [Ybar[:, m+i*q+m:m+(i+1)*q] for i in range(length)]

    Y = np.empty((length, p, m))
    Y[0] = D
    for k in range(1, length):
        Y[k] = Yu[k-1]
        for i in range(1, k+1):
            Y[k] += Yy[i-1] @ Y[k-i]
    return Y
