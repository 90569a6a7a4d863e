#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np
import pytest
from numpy.testing import assert_allclose

from pyssid import InvalidHorizonError, StateSpace, UnsupportedWeightingError
from pyssid.common import factor_sqrt, pinv_svd
from pyssid.projection import WEIGHTINGS, check_weighting, project

def test_check_weighting():
    assert check_weighting('moesp') == 'MOESP'
    assert check_weighting(':N4SID') == 'N4SID'
    for name in ('PO-MOESP', '', None):
        with pytest.raises(UnsupportedWeightingError):
            check_weighting(name)
    assert set(WEIGHTINGS) == {'MOESP', 'N4SID', 'CVA', 'IVM'}

def test_factor_sqrt():
    rng = np.random.default_rng(0)
    L = rng.standard_normal((4, 6))
    X, Xi = factor_sqrt(L)
    assert_allclose(X @ X, L @ L.T, atol=1e-10)
    assert_allclose(Xi @ X, np.eye(4), atol=1e-10)

    # rank deficient, Xi@X projects onto the range of L
    L = rng.standard_normal((4, 2)) @ rng.standard_normal((2, 6))
    X, Xi = factor_sqrt(L, rcond=1e-10)
    P = Xi @ X
    assert_allclose(P @ L, L, atol=1e-10)
    assert np.linalg.matrix_rank(P) == 2

def test_pinv_svd():
    rng = np.random.default_rng(1)
    M = rng.standard_normal((5, 2)) @ rng.standard_normal((2, 4))
    assert_allclose(pinv_svd(M, rcond=1e-10), np.linalg.pinv(M), atol=1e-10)

def test_oblique_projection(system3, data3):
    """The oblique projection equals Γ X, ie. Yf minus the input part"""
    A, B, C, D = system3
    r = s = 6
    y, u = data3.y, data3.u
    proj = project(y, u, r, s, s, rcond=1e-10)
    assert proj.t0 == s
    assert proj.N == 1000 - s - r + 1
    _, x = StateSpace(*system3).simulate(u)
    X = x[proj.t0:proj.t0+proj.N].T
    Gamma = np.vstack([C @ np.linalg.matrix_power(A, i) for i in range(r)])
    assert_allclose(proj.Lw @ proj.Wp, Gamma @ X, atol=1e-7)

    assert proj.Wp.shape == (2*s, proj.N)

@pytest.mark.parametrize('weighting', ['MOESP', 'N4SID', 'CVA', 'IVM'])
def test_projection_rank(data3, weighting):
    proj = project(data3.y, data3.u, 6, 6, 6, weighting, rcond=1e-10)
    s = np.linalg.svd(proj.G, compute_uv=False)
    assert np.sum(s > 1e-8*s[0]) == 3

def test_too_few_columns(data3):
    with pytest.raises(InvalidHorizonError):
        project(data3.y[:100], data3.u[:100], 20, 20, 20)
