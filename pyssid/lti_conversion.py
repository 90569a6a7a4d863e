#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np
from numpy.linalg import solve
from scipy.linalg import eig, eigvals


def is_stable(A, domain='z', strict=False):
    """Determines if a linear state-space model is stable from eigenvalues of `A`

    Parameters
    ----------
    A : ndarray(n,n)
        state matrix
    domain : str, optional {'z', 's'}
        'z' for discrete-time, 's' for continuous-time state-space models
    strict : bool, optional
        Require poles strictly inside the unit circle (or left half-plane),
        ie. asymptotic stability.

    returns
    -------
    bool
    """
    if A.size == 0:
        return True
    if domain == 'z':  # discrete-time
        # Unstable if at least one pole outside unit circle
        mag = abs(eigvals(A))
        if any(mag >= 1) if strict else any(mag > 1):
            return False
    elif domain == 's':  # continuous-time
        # Unstable if at least one pole in right-half plane
        re = np.real(eigvals(A))
        if any(re >= 0) if strict else any(re > 0):
            return False
    else:
        raise ValueError(f"{domain} wrong. Use 's' or 'z'")
    return True

def reflect_unstable(A):
    """Reflect discrete-time poles outside the unit circle into it.

    An eigenvalue λ with ``|λ| > 1`` is replaced by ``λ/|λ|²`` (``1/conj(λ)``),
    which keeps the frequency and inverts the magnitude. Eigenvalues inside
    the unit circle are unchanged.
    """
    lam, V = eig(A)
    mag = np.abs(lam)
    if not np.any(mag > 1):
        return A
    lam = np.where(mag > 1, lam/mag**2, lam)
    Ar = solve(V.T, (V * lam).T).T
    return np.real(Ar)

def ss2frf(A, B, C, D, freq):
    """Compute frequency response function from state-space parameters
    (discrete-time)

    Computes the frequency response function (FRF) or matrix (FRM) Ĝ at the
    normalized frequencies `freq` from the state-space matrices `A`, `B`, `C`,
    and `D`. ```̂G(f) = C*inv(exp(2j*pi*f)*I - A)*B + D```

    Returns
    -------
    Gss : ndarray(F,p,m)
        frequency response matrix

    """
    freq = np.atleast_1d(freq)
    # Z-transform variable
    z = np.exp(2j*np.pi*freq)
    In = np.eye(*A.shape)
    # Use broadcasting. Much faster than for loop.
    Gss = C @ solve((z*In[...,None] - A[...,None]).transpose((2,0,1)), B[None]) + D
    return Gss

def markov_parameters(A, B, C, D, length):
    """Markov parameters (impulse response) of a discrete-time system

    Returns
    -------
    Y : ndarray(length,p,m)
        ``Y[0] = D`` and ``Y[k] = C A^(k-1) B``
    """
    p, m = D.shape
    Y = np.empty((length, p, m))
    Y[0] = D
    AkB = B
    for k in range(1, length):
        Y[k] = C @ AkB
        AkB = A @ AkB
    return Y
