#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np
from scipy.linalg import LinAlgError, solve_discrete_are

from .exceptions import RiccatiNotStabilizableError
from .lti_conversion import is_stable


def noise_covariances(E, n):
    """Split the sample covariance of stacked residuals ``E = [w; v]``

    Returns
    -------
    Q : ndarray(n,n)
        process noise covariance, cov(w)
    R : ndarray(p,p)
        measurement noise covariance, cov(v)
    S : ndarray(n,p)
        cross covariance, cov(w, v)
    """
    N = E.shape[1]
    W = E @ E.T / max(N - 1, 1)
    # symmetrize
    W = (W + W.T) / 2
    return W[:n,:n], W[n:,n:], W[:n,n:]

def kalman_gain(A, C, Q, R, S, dare_fn=solve_discrete_are):
    """Steady-state Kalman (observer) gain from the filtering Riccati equation

    Solves ``P = A P Aᵀ - (A P Cᵀ + S)(C P Cᵀ + R)⁻¹(A P Cᵀ + S)ᵀ + Q`` for the
    stabilizing `P` and returns ``K = (A P Cᵀ + S)(C P Cᵀ + R)⁻¹`` such that
    ``A - K C`` is the state matrix of the predictor.

    The covariances are rescaled before calling the solver, which leaves `K`
    unchanged and `P` scaled by the same factor.

    Parameters
    ----------
    dare_fn : callable, optional
        ``P = dare_fn(a, b, q, r, s=s)`` solving the control-form DARE, see
        :func:`scipy.linalg.solve_discrete_are`. Called with ``a=Aᵀ, b=Cᵀ``.

    Returns
    -------
    K : ndarray(n,p)
    P : ndarray(n,n)

    Raises
    ------
    RiccatiNotStabilizableError
        if the solver fails or the resulting predictor is not stable
    """
    n, p = A.shape[0], C.shape[0]
    if not (np.any(Q) or np.any(R) or np.any(S)):
        # noise free, the predictor equals the simulation model
        return np.zeros((n,p)), np.zeros((n,n))

    a = 1/np.sqrt(np.mean(np.abs(Q)) * np.mean(np.abs(R)))
    if not np.isfinite(a) or a == 0:
        a = 1/max(np.max(np.abs(Q)), np.max(np.abs(R)))
    try:
        P = dare_fn(A.T, C.T, a*Q, a*R, s=a*S)
        K = np.linalg.solve(C @ P @ C.T + a*R, (A @ P @ C.T + a*S).T).T
    except (LinAlgError, ValueError) as e:
        raise RiccatiNotStabilizableError(
            f'No stabilizing solution of the Riccati equation: {e}') from e

    if not np.all(np.isfinite(K)) or not is_stable(A - K @ C, strict=True):
        raise RiccatiNotStabilizableError('The observer A - K C is not stable')
    return K, P/a
