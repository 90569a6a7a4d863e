#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import numpy as np
import pytest

from pyssid import StateSpace, TimeSeriesData


@pytest.fixture
def system3():
    """Stable SISO system of order 3, poles 0.9 and 0.5±0.3j"""
    A = np.array([[0.9, 0, 0],
                  [0, 0.5, 0.3],
                  [0, -0.3, 0.5]])
    B = np.array([[1.], [0.5], [-0.4]])
    C = np.array([[1., 0.8, 0.6]])
    D = np.array([[0.2]])
    return A, B, C, D

@pytest.fixture
def data3(system3):
    """Noise free response of `system3` to 1000 samples of gaussian input"""
    rng = np.random.default_rng(10)
    u = rng.standard_normal(1000)
    y, _ = StateSpace(*system3).simulate(u)
    return TimeSeriesData(y, u)

@pytest.fixture
def system_mimo():
    """Stable system of order 4 with two inputs and two outputs"""
    A = np.array([[0.7, 0.2, 0, 0],
                  [-0.2, 0.7, 0, 0],
                  [0, 0, -0.6, 0],
                  [0, 0, 0, 0.3]])
    B = np.array([[1., 0],
                  [0, 1],
                  [1, -1],
                  [0.5, 1]])
    C = np.array([[1., 0, 1, 0.5],
                  [0, 1, -0.5, 1]])
    D = np.zeros((2,2))
    return A, B, C, D

@pytest.fixture
def data_mimo(system_mimo):
    rng = np.random.default_rng(3)
    u = rng.standard_normal((1000, 2))
    y, _ = StateSpace(*system_mimo).simulate(u)
    return TimeSeriesData(y, u)
