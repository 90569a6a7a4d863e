#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import warnings

import numpy as np

from .common import rank_tol, svd_econ
from .exceptions import (InvalidHorizonError, OrderTooLargeError,
                         RankDeficiencyWarning)
from .okid import okid
from .signal import TimeSeriesData
from .statespace import IdentifiedModel
from .utils.config import get_config


def markov_hankel(Y, r, c, shift=1):
    """Block Hankel matrix of Markov parameters

    ``H[i,j] = Y[i+j+shift]``, with `r` block rows and `c` block columns

    Returns
    -------
    H : ndarray(r*p, c*m)
    """
    _, p, m = Y.shape
    H = np.empty((r*p, c*m))
    for i in range(r):
        for j in range(c):
            H[i*p:(i+1)*p, j*m:(j+1)*m] = Y[i+j+shift]
    return H

def era(data, order, r=None, c=None, length=None, dt=None, svd_fn=None,
        lstsq_fn=None, info=None):
    """Eigensystem realization algorithm

    Realize a state-space model of order `order` from Markov parameters
    (impulse response). If `data` is measured input/output data, the Markov
    parameters are first estimated with :func:`pyssid.okid`.

    Parameters
    ----------
    data : TimeSeriesData or ndarray(L,p,m)
        input/output data or Markov parameters with ``Y[0] = D``. A 1d array is
        taken as the impulse response of a SISO system
    order : int
        model order
    r, c : int, optional
        number of block rows and block columns of the Hankel matrices.
        Default is ``column_factor*order + 1`` from the configuration
    length : int, optional
        number of Markov parameters estimated by OKID. Default is ``r+c+1``
    dt : float, optional
        sample period. Default is `data.dt`, or 1 for Markov parameters
    svd_fn, lstsq_fn : callable, optional
        see :func:`pyssid.subspace_identify`
    info : {0, 1, 2}, optional
        Level of verbosity

    Returns
    -------
    IdentifiedModel
        without noise model, ie. K, Q, R, S and P are None

    Raises
    ------
    OrderTooLargeError
        if ``order >= r`` or ``order > min(r*p, c*m)``
    InvalidHorizonError
        if there are fewer than ``r+c+1`` Markov parameters

    Notes
    -----
    With the Hankel matrices ``H0[i,j] = Y[i+j+1]``, ``H1[i,j] = Y[i+j+2]`` and
    the truncated svd ``H0 ≈ U1 S1 V1ᵀ``:

    A = S1^-½ U1ᵀ H1 V1 S1^-½
    B = first block column of S1^½ V1ᵀ
    C = first block row of U1 S1^½
    D = Y[0]

    See :cite:juang1985
    """
    cfg = get_config()
    if info is None:
        info = cfg.getint('general', 'info', fallback=0)
    svd_fn = svd_econ if svd_fn is None else svd_fn
    if int(order) != order or order < 1:
        raise ValueError(f'order must be a positive integer. Is {order}')
    order = int(order)
    factor = cfg.getint('era', 'column_factor', fallback=2)
    r = factor*order + 1 if r is None else r
    c = r if c is None else c
    if r < 1 or c < 1:
        raise InvalidHorizonError(f'r and c must be positive. Is r={r}, c={c}')

    if isinstance(data, TimeSeriesData):
        if length is None:
            length = r + c + 1
        dt = data.dt if dt is None else dt
        if info:
            print(f'Estimating {length} Markov parameters with OKID')
        Y = okid(data, length, lstsq_fn=lstsq_fn)
    else:
        Y = np.asarray(data, dtype=float)
        if Y.ndim == 1:
            Y = Y[:,None,None]
        if Y.ndim != 3:
            raise ValueError('Markov parameters must have shape (L,p,m). '
                             f'Is {Y.shape}')
        dt = 1 if dt is None else dt

    L, p, m = Y.shape
    if L < r + c + 1:
        raise InvalidHorizonError(f'{L} Markov parameters are too few for r={r}'
                                  f' and c={c}. Need at least {r+c+1}')
    if order >= r:
        raise OrderTooLargeError(f'Order {order} cannot be realized with r={r}.'
                                 ' Need r > order')
    if order > min(r*p, c*m):
        raise OrderTooLargeError(f'Order {order} is larger than the rank bound '
                                 f'min(r*p, c*m) = {min(r*p, c*m)}')

    H0 = markov_hankel(Y, r, c, shift=1)
    H1 = markov_hankel(Y, r, c, shift=2)
    U, s, Vt = svd_fn(H0)
    if s[order-1] <= rank_tol(s, H0.shape):
        warnings.warn(f'Singular value {order} of the Hankel matrix is '
                      f'numerically zero ({s[order-1]:.3e}). The order is '
                      'probably too high', RankDeficiencyWarning, stacklevel=2)
    if info > 1:
        print('Hankel singular values: ' + ' '.join(f'{v:.3e}' for v in s))

    U1, s1, V1t = U[:,:order], s[:order], Vt[:order]
    sq = np.sqrt(s1)
    A = (U1.T @ H1 @ V1t.T) / np.outer(sq, sq)
    B = (sq[:,None] * V1t)[:,:m]
    C = (U1 * sq)[:p]
    D = Y[0]

    if info:
        print(f'ERA model of order {order}. '
              f'|poles|: {np.abs(np.linalg.eigvals(A))}')
    return IdentifiedModel(A, B, C, D, sv=s, focus='simulation', r=r,
                           method='era', dt=dt)
