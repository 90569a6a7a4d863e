#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import warnings

import numpy as np

from .common import rank_tol, svd_econ
from .exceptions import OrderTooLargeError, RankDeficiencyWarning


def gap_order(s, nmax):
    """Order at the largest drop between consecutive singular values.

    The drop is measured as the ratio ``s[i]/s[i+1]``, ie. the order is placed
    where the log of the singular values has its largest step.
    """
    s = np.asarray(s[:nmax+1], dtype=float)
    if len(s) < 2:
        return 1
    # singular values at rounding level are all equally zero. Otherwise the
    # ratio between two of them can exceed the true gap.
    floor = max(s[0] * len(s) * np.finfo(float).eps, np.finfo(float).tiny)
    ls = np.log(np.maximum(s, floor))
    return int(np.argmax(ls[:-1] - ls[1:])) + 1

def geometric_order(s, nmax):
    """Number of singular values above the geometric mean of the largest
    and the smallest one"""
    s = np.asarray(s, dtype=float)
    thr = np.sqrt(s[0] * s[-1])
    return int(min(max(np.sum(s > thr), 1), nmax))

def energy_order(s, nmax, threshold=0.99):
    """Smallest order retaining `threshold` of the energy ``∑s²``

    Only meaningful when the singular values are normalized, ie. the canonical
    correlations of CVA weighting. For MOESP/N4SID the first singular value
    usually holds more than 99% of the energy and order 1 is returned.
    """
    s = np.asarray(s, dtype=float)
    energy = np.cumsum(s**2) / np.sum(s**2)
    return int(min(np.searchsorted(energy, threshold) + 1, nmax))

ORDER_POLICIES = {
    'gap': gap_order,
    'geometric': geometric_order,
    'energy': energy_order,
}

def get_policy(policy):
    if callable(policy):
        return policy
    try:
        return ORDER_POLICIES[policy]
    except KeyError:
        raise ValueError(f'Unknown order policy {policy!r}. Should be a '
                         f'callable or one of {list(ORDER_POLICIES)}') from None

def select_order(G, nx, r, policy='geometric', rcond=None, svd_fn=svd_econ,
                 info=0):
    """Decompose the weighted projection and determine the model order.

    Parameters
    ----------
    G : ndarray(r*p, k)
        weighted projected matrix
    nx : int or 'auto'
        model order. For 'auto' the order is found from the singular values
        using `policy`
    r : int
        future horizon. The order must be strictly less than `r`
    policy : str or callable, optional
        {'geometric', 'gap', 'energy'} or ``nx = policy(s, nmax)``

    Returns
    -------
    U1 : ndarray(r*p, nx)
        leading left singular vectors
    s1 : ndarray(nx)
        leading singular values
    nx : int
    s : ndarray
        all singular values
    """
    U, s, _ = svd_fn(G)
    nmax = min(r - 1, len(s))
    if nx == 'auto':
        if nmax < 1:
            raise OrderTooLargeError(f'No order can be identified with r={r}')
        nx = get_policy(policy)(s, nmax)
        if info:
            print(f'Choosing order {nx}')
    if int(nx) != nx or nx < 1:
        raise ValueError(f'nx must be a positive integer or "auto". Is {nx}')
    nx = int(nx)
    if nx >= r:
        raise OrderTooLargeError(f'Order {nx} cannot be identified with the '
                                 f'future horizon r={r}. Need r > nx')
    if nx > len(s):
        raise OrderTooLargeError(f'Order {nx} is larger than the number of '
                                 f'singular values {len(s)}')

    if s[nx-1] <= rank_tol(s, G.shape, rcond):
        warnings.warn(f'Singular value {nx} is numerically zero '
                      f'({s[nx-1]:.3e}, largest {s[0]:.3e}). The model '
                      'order is probably too high', RankDeficiencyWarning,
                      stacklevel=3)
    if info > 1:
        print('Singular values: ' + ' '.join(f'{v:.3e}' for v in s))

    return U[:,:nx], s[:nx], nx, s
