#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy.linalg import LinAlgError

from pyssid import RiccatiNotStabilizableError
from pyssid.kalman import kalman_gain, noise_covariances


def test_scalar_riccati():
    A, C = np.array([[0.9]]), np.array([[1.]])
    Q, R, S = np.array([[1.]]), np.array([[1.]]), np.array([[0.]])
    K, P = kalman_gain(A, C, Q, R, S)
    # P² - 0.81 P - 1 = 0
    Pt = (0.81 + np.sqrt(0.81**2 + 4)) / 2
    assert_allclose(P, [[Pt]])
    assert_allclose(K, [[0.9*Pt/(Pt + 1)]])

def test_riccati_mimo():
    rng = np.random.default_rng(2)
    A = np.array([[0.5, 0.4], [-0.4, 0.5]])
    C = np.array([[1., 0], [0, 1.]])
    M = rng.standard_normal((4, 4))
    W = M @ M.T
    Q, R, S = W[:2,:2], W[2:,2:], W[:2,2:]
    K, P = kalman_gain(A, C, Q, R, S)
    # P satisfies the filtering Riccati equation
    APC = A @ P @ C.T + S
    rhs = A @ P @ A.T - APC @ np.linalg.solve(C @ P @ C.T + R, APC.T) + Q
    assert_allclose(P, rhs, atol=1e-10)
    assert np.all(np.abs(np.linalg.eigvals(A - K @ C)) < 1)

def test_zero_noise():
    A, C = np.array([[0.9, 0], [0, 0.1]]), np.array([[1., 1.]])
    K, P = kalman_gain(A, C, np.zeros((2,2)), np.zeros((1,1)),
                       np.zeros((2,1)))
    assert_allclose(K, np.zeros((2,1)))
    assert_allclose(P, np.zeros((2,2)))

def test_solver_failure_is_reraised():
    def dare_fn(a, b, q, r, s=None):
        raise LinAlgError('Failed to find a finite solution.')

    A, C = np.array([[0.9]]), np.array([[1.]])
    with pytest.raises(RiccatiNotStabilizableError) as excinfo:
        kalman_gain(A, C, np.eye(1), np.eye(1), np.zeros((1,1)),
                    dare_fn=dare_fn)
    assert isinstance(excinfo.value.__cause__, LinAlgError)

def test_unstable_observer_rejected():
    # a solver returning a non-stabilizing solution
    def dare_fn(a, b, q, r, s=None):
        return np.zeros_like(q)

    A, C = np.array([[1.5]]), np.array([[1.]])
    with pytest.raises(RiccatiNotStabilizableError):
        kalman_gain(A, C, np.eye(1), np.eye(1), np.zeros((1,1)),
                    dare_fn=dare_fn)

def test_noise_covariances():
    rng = np.random.default_rng(0)
    E = rng.standard_normal((3, 50000))
    E[2] += E[0]
    Q, R, S = noise_covariances(E, 2)
    assert Q.shape == (2,2)
    assert R.shape == (1,1)
    assert S.shape == (2,1)
    assert_allclose(R, [[2.]], rtol=0.05)
    assert_allclose(S, [[1.], [0.]], atol=0.05)
    assert_allclose(Q, Q.T)
