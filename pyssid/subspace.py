#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np
from scipy.linalg import solve_discrete_are

from .common import lstsq_solve, svd_econ
from .exceptions import OrderTooLargeError
from .hankel import default_horizons
from .kalman import kalman_gain, noise_covariances
from .lti_conversion import is_stable, reflect_unstable
from .order import select_order
from .projection import check_weighting, project
from .statespace import IdentifiedModel, StateSpace
from .utils.config import get_config

FOCUS = ('prediction', 'simulation')


def subspace_identify(data, nx='auto', focus=None, r=None, s1=None, s2=None,
                      weighting=None, zeroD=False, stable=None,
                      order_policy=None, svd_fn=None, lstsq_fn=None,
                      dare_fn=None, rcond=None, info=None):
    """Estimate a state-space model in innovations form by subspace
    identification

    x(t+1) = A x(t) + B u(t) + K e(t)
    y(t)   = C x(t) + D u(t) + e(t)

    `p`: number of outputs, `m`: number of inputs, `ns`: number of samples.
    Arguments left as None take their default from the configuration, see
    :func:`pyssid.utils.config.load_config`.

    Parameters
    ----------
    data : TimeSeriesData
        measured input/output data
    nx : int or 'auto'
        model order. For 'auto' the order is determined from the singular
        values of the weighted projection, using `order_policy`
    focus : str {'prediction', 'simulation'}, optional
        'prediction' estimates B and D from the one-step state equations.
        'simulation' estimates B, D (and x0) by minimizing the open-loop
        simulation error of the outputs
    r : int, optional
        future (prediction) horizon. Must be > nx. Default is nx + 10, or
        ``min(ns//20, 20)`` if nx is 'auto'
    s1, s2 : int, optional
        past horizons for outputs and inputs. Default is `r`
    weighting : str {'MOESP', 'N4SID', 'CVA', 'IVM'}, optional
        weighting of the projected matrix before the svd
    zeroD : bool, optional
        force the feedthrough D to zero
    stable : bool, optional
        reflect unstable poles of the estimated A into the unit circle
    order_policy : str or callable, optional
        see :func:`pyssid.order.select_order`
    svd_fn : callable, optional
        ``U, s, Vt = svd_fn(M)``, economy svd with descending `s`
    lstsq_fn : callable, optional
        ``X = lstsq_fn(A, B)`` minimizing ``||A@X - B||``. Used for A, the
        state sequence and the B/D regressions
    dare_fn : callable, optional
        discrete Riccati solver, see :func:`pyssid.kalman.kalman_gain`
    rcond : float, optional
        relative threshold for numerically zero singular values
    info : {0, 1, 2}, optional
        Level of verbosity

    Returns
    -------
    IdentifiedModel

    Raises
    ------
    InvalidHorizonError
        a horizon is non-positive or too long for the data
    OrderTooLargeError
        ``nx >= r``
    UnsupportedWeightingError
        unknown `weighting`
    RiccatiNotStabilizableError
        no stabilizing Kalman gain exists

    Notes
    -----
    Algorithm (see :cite:overschee1996, :cite:viberg1995):
      1. Form block Hankel matrices of past and future data
      2. LQ factorization and weighted oblique projection ``W1 O W2``
      3. svd ``W1 O W2 = U S Vᵀ``, determine nx
      4. ``Γ = W1⁻¹ U1 S1^½``. ``C`` is the first block row of ``Γ`` and ``A``
         is found from the shift property ``Γ[p:] = Γ[:-p] A``
      5. State sequence ``X = Γ⁺ O``. Estimate B, D from the regression
         ``[x(k+1) - A x(k); y(k) - C x(k)] = [B; D] u(k)``
      6. Noise covariances from the residuals and K from the Riccati equation
    """
    cfg = get_config()
    if info is None:
        info = cfg.getint('general', 'info', fallback=0)
    if focus is None:
        focus = cfg.get('subspace', 'focus', fallback='prediction')
    if weighting is None:
        weighting = cfg.get('subspace', 'weighting', fallback='MOESP')
    if stable is None:
        stable = cfg.getboolean('subspace', 'stable', fallback=True)
    if order_policy is None:
        order_policy = cfg.get('subspace', 'order_policy',
                               fallback='geometric')
    if rcond is None:
        rcond = cfg.getfloat('subspace', 'rcond', fallback=1e-10)
    margin = cfg.getint('subspace', 'horizon_margin', fallback=10)
    svd_fn = svd_econ if svd_fn is None else svd_fn
    lstsq_fn = lstsq_solve if lstsq_fn is None else lstsq_fn
    dare_fn = solve_discrete_are if dare_fn is None else dare_fn

    focus = focus.lstrip(':')
    if focus not in FOCUS:
        raise ValueError(f'focus must be one of {FOCUS}. Is {focus!r}')
    weighting = check_weighting(weighting)
    if nx != 'auto':
        if int(nx) != nx or nx < 1:
            raise ValueError(f'nx must be a positive integer or "auto". '
                             f'Is {nx}')
        nx = int(nx)
        if r is not None and r <= nx:
            raise OrderTooLargeError(f'Order {nx} cannot be identified with '
                                     f'the future horizon r={r}. Need r > nx')

    y, u = data.y, data.u
    ns, p = y.shape
    r, s1, s2 = default_horizons(ns, nx, r, s1, s2, margin)
    if info:
        print(f'Starting subspace identification, {weighting} weighting')
        print(f'ns: {ns}, p: {p}, m: {data.m}. r: {r}, s1: {s1}, s2: {s2}')

    proj = project(y, u, r, s1, s2, weighting, rcond, svd_fn)
    U1, sv1, nx, sv = select_order(proj.G, nx, r, order_policy, rcond,
                                   svd_fn, info)

    # extended observability matrix, un-weighted
    Gamma = U1 * np.sqrt(sv1)
    if proj.W1inv is not None:
        Gamma = proj.W1inv @ Gamma
    A, C = estimate_ac(Gamma, p, lstsq_fn)
    if stable and not is_stable(A):
        if info:
            print('A is unstable, reflecting poles into the unit circle')
        A = reflect_unstable(A)

    X = lstsq_fn(Gamma, proj.Lw @ proj.Wp)
    if focus == 'prediction':
        B, D = estimate_bd_states(A, C, X, y, u, proj.t0, zeroD, lstsq_fn)
    else:
        B, D, x0 = estimate_bd_simulation(A, C, y, u, zeroD, lstsq_fn)

    E = state_residuals(A, B, C, D, X, y, u, proj.t0)
    Q, R, S = noise_covariances(E, nx)
    K, P = kalman_gain(A, C, Q, R, S, dare_fn)

    if focus == 'prediction':
        x0 = estimate_x0(A, B, C, D, K, y, u, lstsq_fn)

    if info:
        print(f'Identified model of order {nx}. '
              f'|poles|: {np.abs(np.linalg.eigvals(A))}')

    return IdentifiedModel(A, B, C, D, K=K, Q=Q, R=R, S=S, P=P, x0=x0, sv=sv,
                           focus=focus, weighting=weighting, r=r, s1=s1,
                           s2=s2, method='subspace', dt=data.dt)

def estimate_ac(Gamma, p, lstsq_fn=lstsq_solve):
    """Estimate A and C from the shift property of the extended
    observability matrix, ``Γ[p:] = Γ[:-p] A``"""
    A = lstsq_fn(Gamma[:-p], Gamma[p:])
    C = Gamma[:p].copy()
    return A, C

def _future_samples(X, y, u, t0):
    N = X.shape[1]
    return X[:,:-1], X[:,1:], u[t0:t0+N-1], y[t0:t0+N-1]

def estimate_bd_states(A, C, X, y, u, t0, zeroD=False,
                       lstsq_fn=lstsq_solve):
    """Estimate B and D from the state sequence with A and C fixed

    Column `j` of `X` is the state at sample ``t0 + j``. Solves
    ``[x(k+1) - A x(k); y(k) - C x(k)] = [B; D] u(k)`` in least squares sense.
    With `zeroD` only the state rows are used and D is zero.
    """
    n, p, m = A.shape[0], C.shape[0], u.shape[1]
    X0, X1, uk, yk = _future_samples(X, y, u, t0)
    rhs = np.vstack((X1 - A @ X0, yk.T - C @ X0))
    if zeroD:
        B = lstsq_fn(uk, rhs[:n].T).T
        D = np.zeros((p,m))
    else:
        BD = lstsq_fn(uk, rhs.T).T
        B, D = BD[:n], BD[n:]
    return B, D

def state_residuals(A, B, C, D, X, y, u, t0):
    """Residuals ``[w; v]`` of the state equations along the state sequence"""
    X0, X1, uk, yk = _future_samples(X, y, u, t0)
    return np.vstack((X1 - A @ X0 - B @ uk.T,
                      yk.T - C @ X0 - D @ uk.T))

def _output_regressors(A, C, u, with_B=True, with_D=True):
    """Regressors of the output w.r.t. x0, vec(B) and vec(D)

    For the system ``x(t+1) = A x(t) + B u(t), y(t) = C x(t) + D u(t)``
    the output is linear in the initial state and the elements of B and D.
    Returns ``phi`` with shape (ns, p, npar), such that
    ``y(t) = phi[t] @ [x0; B.ravel(); D.ravel()]``.
    """
    ns, m = u.shape
    n, p = A.shape[0], C.shape[0]
    In, Ip = np.eye(n), np.eye(p)
    npar = n + with_B*n*m + with_D*p*m
    phi = np.empty((ns, p, npar))
    Zx = In
    ZB = np.zeros((n, n*m))
    for t in range(ns):
        phi[t,:,:n] = C @ Zx
        if with_B:
            phi[t,:,n:n+n*m] = C @ ZB
            ZB = A @ ZB + np.kron(In, u[t])
        if with_D:
            phi[t,:,npar-p*m:] = np.kron(Ip, u[t])
        Zx = A @ Zx
    return phi

def estimate_bd_simulation(A, C, y, u, zeroD=False, lstsq_fn=lstsq_solve):
    """Estimate B, D and x0 minimizing the simulation error of the outputs,
    with A and C fixed.

    Returns
    -------
    B : ndarray(n,m)
    D : ndarray(p,m)
    x0 : ndarray(n)
    """
    ns, p = y.shape
    n, m = A.shape[0], u.shape[1]
    phi = _output_regressors(A, C, u, with_D=not zeroD)
    theta = lstsq_fn(phi.reshape(ns*p, -1), y.ravel())
    x0 = theta[:n]
    B = theta[n:n+n*m].reshape(n,m)
    if zeroD:
        D = np.zeros((p,m))
    else:
        D = theta[n+n*m:].reshape(p,m)
    return B, D, x0

def estimate_x0(A, B, C, D, K, y, u, lstsq_fn=lstsq_solve):
    """Initial state minimizing the one-step prediction errors"""
    ns, p = y.shape
    n = A.shape[0]
    pred = StateSpace(A - K @ C, np.hstack((B - K @ D, K)), C,
                      np.hstack((D, np.zeros((p,p)))))
    y0, _ = pred.simulate(np.hstack((u, y)), x0=np.zeros(n))
    phi = _output_regressors(pred.A, C, u, with_B=False, with_D=False)
    return lstsq_fn(phi.reshape(ns*p, n), (y - y0).ravel())

n4sid = subspace_identify
