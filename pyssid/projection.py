#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Weighted oblique projection of future outputs.

All four weighting schemes share the LQ factorization of the stacked data
matrix

    [Uf]   [L11          ] [Q1]
    [Wp] = [L21 L22      ] [Q2]
    [Yf]   [L31 L32  L33 ] [Q3]

where `Uf` and `Yf` are future inputs and outputs and ``Wp = [Yp; Up]`` is
past data. The orthogonal complement of the row space of `Uf` is spanned by
``Q2, Q3``, so that ``Yf Π⊥ Wpᵀ/N = L32 L22ᵀ`` and the oblique projection of
`Yf` along `Uf` onto `Wp` is ``O = L32 L22⁺ Wp = Γ X``.

The schemes only differ in the weights `W1`, `W2` in ``G = W1 (L32 L22ᵀ) W2``,
see :cite:viberg1995 table 1:

======  =====================  ===========================
scheme  W1                     W2
======  =====================  ===========================
MOESP   I                      (Wp Π⊥ Wpᵀ)^-½
N4SID   I                      (Wp Π⊥ Wpᵀ)⁺ (Wp Wpᵀ)^½
CVA     (Yf Π⊥ Yfᵀ)^-½          (Wp Π⊥ Wpᵀ)^-½
IVM     (Yf Π⊥ Yfᵀ)^-½          (Wp Wpᵀ)^-½
======  =====================  ===========================

References
----------
.. _viberg1995:
   Viberg, M. (1995). Subspace-based methods for the identification of
   linear time-invariant systems. Automatica, 31(12):1835-1851

.. _overschee1996:
   Van Overschee, P., De Moor, B. (1996). Subspace Identification for Linear
   Systems. Kluwer Academic Publishers
"""

from collections import namedtuple

import numpy as np
# qr(mode='r') returns r in economic form. This is not the case for scipy
from numpy.linalg import qr

from .common import factor_sqrt, pinv_svd, svd_econ
from .exceptions import InvalidHorizonError, UnsupportedWeightingError
from .hankel import block_hankel

Projection = namedtuple('Projection', 'G W1inv Lw Wp t0 N')
Projection.__doc__ = """Result of the weighted projection

G : weighted matrix to be decomposed
W1inv : inverse row weight, None for identity
Lw : ``O = Lw @ Wp`` is the oblique projection
Wp : past data Hankel matrix
t0 : sample index of the first column of the future Hankel matrices
N : number of columns
"""


def _moesp(L21, L22, L32, L33, rcond, svd_fn):
    _, iWc = factor_sqrt(L22, rcond, svd_fn)
    return L32 @ L22.T @ iWc, None

def _n4sid(L21, L22, L32, L33, rcond, svd_fn):
    Wp_sqrt, _ = factor_sqrt(np.hstack((L21, L22)), rcond, svd_fn)
    return L32 @ pinv_svd(L22, rcond, svd_fn) @ Wp_sqrt, None

def _cva(L21, L22, L32, L33, rcond, svd_fn):
    W1inv, W1 = factor_sqrt(np.hstack((L32, L33)), rcond, svd_fn)
    _, iWc = factor_sqrt(L22, rcond, svd_fn)
    return W1 @ L32 @ L22.T @ iWc, W1inv

def _ivm(L21, L22, L32, L33, rcond, svd_fn):
    W1inv, W1 = factor_sqrt(np.hstack((L32, L33)), rcond, svd_fn)
    _, iWc = factor_sqrt(np.hstack((L21, L22)), rcond, svd_fn)
    return W1 @ L32 @ L22.T @ iWc, W1inv

WEIGHTINGS = {
    'MOESP': _moesp,
    'N4SID': _n4sid,
    'CVA': _cva,
    'IVM': _ivm,
}

def check_weighting(weighting):
    """Normalize the name of a weighting scheme, ie. 'moesp' -> 'MOESP'"""
    if isinstance(weighting, str):
        name = weighting.lstrip(':').upper()
        if name in WEIGHTINGS:
            return name
    raise UnsupportedWeightingError(f'Unknown weighting {weighting!r}. '
                                    f'Should be one of {list(WEIGHTINGS)}')

def project(y, u, r, s1, s2, weighting='MOESP', rcond=None, svd_fn=svd_econ):
    """Weighted oblique projection of the future outputs.

    Parameters
    ----------
    y : ndarray(ns,p)
        outputs
    u : ndarray(ns,m)
        inputs
    r : int
        future (prediction) horizon
    s1, s2 : int
        past horizons for outputs and inputs
    weighting : str {'MOESP', 'N4SID', 'CVA', 'IVM'}
    rcond : float, optional
        relative threshold for the rank revealing (inverse) square roots
    svd_fn : callable, optional
        ``U, s, Vt = svd_fn(M)``

    Returns
    -------
    Projection
    """
    weight = WEIGHTINGS[check_weighting(weighting)]
    ns, p = y.shape
    m = u.shape[1]
    t0 = max(s1, s2)
    N = ns - t0 - r + 1
    nrows = r*m + s1*p + s2*m + r*p
    if N < nrows:
        raise InvalidHorizonError(
            f'Too few samples ({ns}) for horizons r={r}, s1={s1}, s2={s2}. '
            f'The data matrix has {nrows} rows but only {N} columns')

    Uf = block_hankel(u, r, t0, N)
    Yf = block_hankel(y, r, t0, N)
    Wp = np.vstack((block_hankel(y, s1, t0-s1, N),
                    block_hankel(u, s2, t0-s2, N)))

    # LQ factorization of the scaled data matrix from the QR of its transpose
    Rt = qr(np.vstack((Uf, Wp, Yf)).T / np.sqrt(N), mode='r')
    L = Rt.T
    a = r*m
    b = a + s1*p + s2*m
    L21, L22 = L[a:b,:a], L[a:b,a:b]
    L32, L33 = L[b:,a:b], L[b:,b:]

    G, W1inv = weight(L21, L22, L32, L33, rcond, svd_fn)
    Lw = L32 @ pinv_svd(L22, rcond, svd_fn)
    return Projection(G, W1inv, Lw, Wp, t0, N)
