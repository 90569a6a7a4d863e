#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np
from scipy.linalg import lstsq, svd


def svd_econ(M):
    """Economy size svd, ``M = U*s@Vt`` with `s` in descending order.

    Default decomposition used by the identification routines. Any callable
    with the same signature and return values can be given instead, ie. a
    robust/outlier resistant variant.
    """
    return svd(M, full_matrices=False)

def lstsq_solve(A, B):
    """Default least squares solver, ``X = argmin ||A@X - B||``"""
    X, *_ = lstsq(A, B)
    return X

def rank_tol(s, shape, rcond=None):
    """Threshold for numerically zero singular values"""
    if len(s) == 0:
        return 0.
    if rcond is None:
        rcond = max(shape) * np.finfo(float).eps
    return rcond * s[0]

def pinv_svd(M, rcond=None, svd_fn=svd_econ):
    """Rank revealing pseudo-inverse of `M`.

    Singular values below ``rcond*s[0]`` are treated as zero.
    """
    U, s, Vt = svd_fn(M)
    keep = s > rank_tol(s, M.shape, rcond)
    return (Vt[keep].T / s[keep]) @ U[:,keep].T

def factor_sqrt(L, rcond=None, svd_fn=svd_econ):
    """Square root and pseudo-inverse square root of ``L@L.T``

    Calculate `X` and `Xi` such that ``X@X = L@L.T`` and ``Xi@X`` is the
    projector onto the range of `L`. Working on the factor `L` instead of the
    covariance ``L@L.T`` avoids squaring the condition number. Given the svd
    ``L = U*s@Vt`` we see that ``L@L.T = U*s²@U.T`` and it follows that
    ``(L@L.T)^½ = U*s@U.T``.

    Returns
    -------
    X : ndarray(n,n)
        matrix square root
    Xi : ndarray(n,n)
        pseudo-inverse of the matrix square root
    """
    U, s, _ = svd_fn(L)
    keep = s > rank_tol(s, L.shape, rcond)
    X = U * s @ U.T
    Xi = U[:,keep] * (1/s[keep]) @ U[:,keep].T
    return X, Xi

def atleast_2d_time(x):
    """Cast a signal to shape (ns, channels). 1d arrays are one channel."""
    x = np.asarray(x, dtype=float)
    if x.ndim == 1:
        x = x[:,None]
    if x.ndim != 2:
        raise ValueError(f'Signal must be 1d or 2d. Is {x.ndim}d')
    return x
