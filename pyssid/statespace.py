#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np
from scipy.signal import abcd_normalize, dlsim

from .common import atleast_2d_time
from .lti_conversion import is_stable, ss2frf


def _atleast_2d_or_none(arg):
    if arg is not None:
        return np.atleast_2d(arg)

def _copy_2d_or_none(arg):
    if arg is not None:
        return np.array(arg, dtype=float, ndmin=2)


class StateSpace():
    def __init__(self, *system, **kwargs):
        """Initialize the discrete-time state space system.

        x(t+1) = A x(t) + B u(t)
        y(t)   = C x(t) + D u(t)
        """

        self.n, self.m, self.p = [0]*3
        self._A, self._B, self._C, self._D = [None]*4
        self.dt = kwargs.pop('dt', 1)
        super().__init__(**kwargs)

        sys = system
        if len(system) == 1 and isinstance(system[0], StateSpace):
            sys = system[0]
            sys = sys.A, sys.B, sys.C, sys.D
        if len(sys) != 4:
            raise ValueError(f'Wrong initialization of {self.__class__.__name__}'
                             f'. Give A, B, C, D. Got {len(sys)} arguments')
        self.A, self.B, self.C, self.D = abcd_normalize(*sys)

    def __repr__(self):
        """Return representation of the `StateSpace` system."""
        return (f'{self.__class__.__name__},\n'
                f'{repr(self.A)},\n'
                f'{repr(self.B)},\n'
                f'{repr(self.C)},\n'
                f'{repr(self.D)},\n'
                f'dt: {repr(self.dt)}')

    @property
    def A(self):
        """State matrix of the `StateSpace` system."""
        return self._A

    @A.setter
    def A(self, A):
        self._A = _atleast_2d_or_none(A)
        self.n = self.A.shape[0]

    @property
    def B(self):
        """Input matrix of the `StateSpace` system."""
        return self._B

    @B.setter
    def B(self, B):
        self._B = _atleast_2d_or_none(B)
        self.m = self.B.shape[-1]

    @property
    def C(self):
        """Output matrix of the `StateSpace` system."""
        return self._C

    @C.setter
    def C(self, C):
        self._C = _atleast_2d_or_none(C)
        self.p = self.C.shape[0]

    @property
    def D(self):
        """Feedthrough matrix of the `StateSpace` system."""
        return self._D

    @D.setter
    def D(self, D):
        self._D = _atleast_2d_or_none(D)

    @property
    def nx(self):
        return self.n

    @property
    def npar(self):
        n, m, p = self.n, self.m, self.p
        return n**2 + n*m + p*n + p*m

    def _get_system(self):
        return (self.A, self.B, self.C, self.D, self.dt)

    def extract(self, x0):
        """Extract A, B, C, D from flattened array"""
        n, m, p = self.n, self.m, self.p
        A = x0.flat[:n**2].reshape((n,n))
        B = x0.flat[n**2 + np.r_[:n*m]].reshape((n,m))
        C = x0.flat[n**2+n*m + np.r_[:p*n]].reshape((p,n))
        D = x0.flat[n*(p+m+n):].reshape((p,m))
        return A, B, C, D

    def flatten(self):
        """Returns the state space as flattened array"""
        n, m, p = self.n, self.m, self.p

        x0 = np.empty(self.npar)
        x0[:n**2] = self.A.ravel()
        x0[n**2 + np.r_[:n*m]] = self.B.ravel()
        x0[n**2 + n*m + np.r_[:n*p]] = self.C.ravel()
        x0[n**2 + n*m + n*p:] = self.D.ravel()
        return x0

    def simulate(self, u, x0=None):
        """Return the response of the discrete-time system to input `u`.

        See :func:`scipy.signal.dlsim` for details.

        Returns
        -------
        y : ndarray(ns,p)
        x : ndarray(ns,n)
        """
        u = atleast_2d_time(u)
        if self.n == 0:
            # pure feedthrough
            return u @ self.D.T, np.empty((u.shape[0], 0))
        _, y, x = dlsim(self._get_system(), u, x0=x0)
        return y.reshape(u.shape[0], self.p), x

    def freqresp(self, freq):
        """Frequency response matrix at normalized frequencies (0 < freq < 0.5)

        Returns
        -------
        G : ndarray(F,p,m)
        """
        return ss2frf(self.A, self.B, self.C, self.D, freq)

    @property
    def poles(self):
        return np.linalg.eigvals(self.A)

    @property
    def stable(self):
        return is_stable(self.A, domain='z')


class IdentifiedModel(StateSpace):
    """Identified innovations form model

    x(t+1) = A x(t) + B u(t) + K e(t)
    y(t)   = C x(t) + D u(t) + e(t)

    Returned by :func:`pyssid.subspace_identify` and :func:`pyssid.era`. The
    model is immutable. `K`, `P`, `Q`, `R` and `S` are None for models without
    a noise model (ERA).

    Attributes
    ----------
    K : ndarray(n,p)
        steady-state Kalman (observer) gain
    P : ndarray(n,n)
        state error covariance of the Riccati solution
    Q, R, S : ndarray
        process, measurement and cross noise covariances
    x0 : ndarray(n)
        estimated initial state
    sv : ndarray
        singular values used for order selection
    focus : str
    weighting : str
    r, s1, s2 : int
        horizons used
    """

    def __init__(self, A, B, C, D, K=None, Q=None, R=None, S=None, P=None,
                 x0=None, sv=None, focus=None, weighting=None, r=None,
                 s1=None, s2=None, method='subspace', dt=1):
        # private copies, they are made read-only below
        super().__init__(*(np.array(X, dtype=float) for X in (A, B, C, D)),
                         dt=dt)
        self._K = _copy_2d_or_none(K)
        self.Q, self.R, self.S, self.P = [_copy_2d_or_none(X)
                                          for X in (Q, R, S, P)]
        self.x0 = (np.zeros(self.n) if x0 is None else
                   np.array(x0, dtype=float).ravel())
        self.sv = None if sv is None else np.array(sv, dtype=float)
        self.focus = focus
        self.weighting = weighting
        self.r, self.s1, self.s2 = r, s1, s2
        self.method = method
        for X in (self._A, self._B, self._C, self._D, self._K, self.Q,
                  self.R, self.S, self.P, self.x0, self.sv):
            if X is not None:
                X.setflags(write=False)
        self._frozen = True

    def __setattr__(self, name, value):
        if getattr(self, '_frozen', False):
            raise AttributeError(f'{self.__class__.__name__} is immutable')
        super().__setattr__(name, value)

    def __repr__(self):
        rep = super().__repr__()
        idt = rep.rfind('dt')
        return (rep[:idt] +
                f'{repr(self.K)},\n'
                f'{rep[idt:]},\n'
                f'method: {self.method}, focus: {self.focus}, '
                f'weighting: {self.weighting}, r: {self.r}')

    @property
    def K(self):
        """Kalman gain of the innovations form"""
        return self._K

    @property
    def has_noise_model(self):
        return self._K is not None

    def _gain(self):
        if self._K is None:
            return np.zeros((self.n, self.p))
        return self._K

    def predictor(self):
        """One-step-ahead predictor with input ``[u; y]``

        x(t+1) = (A - KC) x(t) + [B - KD, K] [u(t); y(t)]
        ŷ(t)   = C x(t) + [D, 0] [u(t); y(t)]

        For models without noise model (K is None) the predictor is the
        simulation model.
        """
        K = self._gain()
        return StateSpace(self.A - K @ self.C,
                          np.hstack((self.B - K @ self.D, K)),
                          self.C,
                          np.hstack((self.D, np.zeros((self.p, self.p)))),
                          dt=self.dt)

    def predict(self, data, x0=None):
        """One-step-ahead prediction of the outputs in `data`

        Returns
        -------
        yhat : ndarray(ns,p)
        """
        if x0 is None:
            x0 = self.x0
        uy = np.hstack((data.u, data.y))
        yhat, _ = self.predictor().simulate(uy, x0=x0)
        return yhat

    def residuals(self, data, focus=None, x0=None):
        """Prediction (or simulation) errors ``y - ŷ``"""
        focus = self.focus if focus is None else focus
        if x0 is None:
            x0 = self.x0
        if focus == 'prediction':
            yhat = self.predict(data, x0=x0)
        elif focus == 'simulation':
            yhat, _ = self.simulate(data.u, x0=x0)
        else:
            raise ValueError(f"focus must be 'prediction' or 'simulation'. "
                             f"Is {focus!r}")
        return data.y - yhat

    def cost(self, data, x0=None, focus=None):
        """Sum of squared prediction (or simulation) errors"""
        focus = self.focus if focus is None else focus
        if x0 is None:
            x0 = self.flatten()
        err = costfcn(x0, self, data, focus=focus)
        return np.dot(err, err)


def costfcn(x0, model, data, focus='prediction'):
    """Compute the vector of residuals such that the function to minimize is

    res = ∑ₖ e[k]ᵀ*e[k], where the error is given by e = y - ŷ

    This is the interface offered to an external (prediction error) optimizer.
    `x0` holds the flattened ``A, B, C, D`` matrices, see
    :meth:`StateSpace.flatten`. The Kalman gain and initial state of `model`
    are kept fixed.

    Parameters
    ----------
    x0 : ndarray(npar)
        flattened parameters
    model : IdentifiedModel
        model giving the structure (n, m, p), K and the initial state
    data : TimeSeriesData
    focus : str {'prediction', 'simulation'}

    Returns
    -------
    err : ndarray(ns*p)
        residuals, ordered output by output
    """
    A, B, C, D = model.extract(np.asarray(x0, dtype=float))
    K = model.K if focus == 'prediction' else None
    trial = IdentifiedModel(A, B, C, D, K=K, x0=model.x0, dt=model.dt)
    return trial.residuals(data, focus=focus).ravel(order='F')
