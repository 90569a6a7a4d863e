#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np
import pytest
from numpy.testing import assert_allclose

from pyssid import (IdentifiedModel, StateSpace, TimeSeriesData, costfcn,
                    markov_parameters, subspace_identify)
from pyssid.lti_conversion import is_stable, reflect_unstable


def test_markov_parameters_impulse(system3):
    u = np.zeros(30)
    u[0] = 1
    y, _ = StateSpace(*system3).simulate(u)
    Y = markov_parameters(*system3, 30)
    assert_allclose(Y[:,0,0], y[:,0], atol=1e-12)

def test_flatten_extract(system_mimo):
    sys = StateSpace(*system_mimo)
    x0 = sys.flatten()
    assert x0.shape == (sys.npar,)
    for X, Xe in zip(system_mimo, sys.extract(x0)):
        assert_allclose(Xe, X)

def test_freqresp(system3):
    A, B, C, D = system3
    G = StateSpace(*system3).freqresp([0, 0.25])
    assert G.shape == (2, 1, 1)
    # static gain
    assert_allclose(G[0], C @ np.linalg.solve(np.eye(3) - A, B) + D)

def test_stability():
    assert is_stable(np.diag([0.5, -0.9]))
    assert not is_stable(np.diag([0.5, 1.2]))
    assert is_stable(np.diag([1., 0.5]))
    assert not is_stable(np.diag([1., 0.5]), strict=True)
    assert is_stable(np.diag([-1., -2.]), domain='s')
    with pytest.raises(ValueError):
        is_stable(np.eye(2), domain='x')

def test_reflect_unstable():
    A = np.array([[0.5, 1.], [0, 2.]])
    Ar = reflect_unstable(A)
    assert_allclose(np.sort(np.linalg.eigvals(Ar).real), [0.5, 0.5],
                    atol=1e-6)
    A = np.diag([0.5, 0.2])
    assert reflect_unstable(A) is A

def test_model_immutable(system3):
    A = np.array(system3[0])
    model = IdentifiedModel(A, *system3[1:], K=np.zeros((3,1)))
    # the callers array is copied and left writeable
    A[0,0] = 0.1
    assert model.A[0,0] == 0.9
    with pytest.raises(ValueError):
        model.A[0,0] = 0.1
    with pytest.raises(AttributeError):
        model.A = A
    with pytest.raises(AttributeError):
        model.method = 'era'

def test_predictor_without_noise_model(system3, data3):
    model = IdentifiedModel(*system3)
    assert model.K is None
    yhat = model.predict(data3)
    ysim, _ = model.simulate(data3.u)
    assert_allclose(yhat, ysim, atol=1e-12)
    assert_allclose(yhat, data3.y, atol=1e-12)

def test_predictor_structure(system3):
    A, B, C, D = system3
    K = np.array([[0.2], [0.1], [0.]])
    pred = IdentifiedModel(A, B, C, D, K=K).predictor()
    assert_allclose(pred.A, A - K @ C)
    assert_allclose(pred.B, np.hstack((B - K @ D, K)))
    assert_allclose(pred.D, [[0.2, 0]])

def test_costfcn(data3):
    model = subspace_identify(data3, nx=3)
    x0 = model.flatten()
    err = costfcn(x0, model, data3)
    assert err.shape == (data3.ns * data3.p,)
    assert_allclose(err, model.residuals(data3).ravel(order='F'))
    assert_allclose(model.cost(data3), np.dot(err, err))

    # a perturbed model has a larger cost
    x1 = x0.copy()
    x1[0] += 0.01
    err1 = costfcn(x1, model, data3)
    assert np.dot(err1, err1) > np.dot(err, err)

    with pytest.raises(ValueError):
        costfcn(x0, model, data3, focus='filtering')

def test_costfcn_simulation(system3):
    A, B, C, D = system3
    rng = np.random.default_rng(4)
    u = rng.standard_normal(300)
    y, _ = StateSpace(A, B, C, D).simulate(u)
    data = TimeSeriesData(y + 1, u)
    model = IdentifiedModel(A, B, C, D, K=np.ones((3,1)), focus='simulation')
    err = costfcn(model.flatten(), model, data, focus='simulation')
    assert_allclose(err, np.ones(300), atol=1e-12)
