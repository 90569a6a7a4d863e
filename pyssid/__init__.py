#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import sys

class UnsupportedPythonError(Exception):
    pass


__minimum_python_version__ = "3.8"
if sys.version_info < tuple((int(val) for val in __minimum_python_version__.split('.'))):
    raise UnsupportedPythonError(f"pyssid does not support Python < {__minimum_python_version__}")


__version__ = "0.1.dev1"

# this indicates whether or not we are in the package's setup.py
# see https://github.com/astropy/astropy/blob/master/astropy/__init__.py#L63
try:
    _PYSSID_SETUP_
except NameError:
    import builtins
    builtins._PYSSID_SETUP_ = False

if not _PYSSID_SETUP_:
    from .era import era
    from .exceptions import (IdentificationError, InvalidHorizonError,
                             OrderTooLargeError, RankDeficiencyWarning,
                             RiccatiNotStabilizableError,
                             UnsupportedWeightingError)
    from .lti_conversion import markov_parameters
    from .okid import okid
    from .signal import TimeSeriesData
    from .statespace import IdentifiedModel, StateSpace, costfcn
    from .subspace import n4sid, subspace_identify
    from .utils.config import get_config, load_config, print_config

    __all__ = ['TimeSeriesData', 'subspace_identify', 'n4sid', 'era', 'okid',
               'IdentifiedModel', 'StateSpace', 'costfcn', 'markov_parameters',
               'IdentificationError', 'InvalidHorizonError',
               'OrderTooLargeError', 'UnsupportedWeightingError',
               'RiccatiNotStabilizableError', 'RankDeficiencyWarning',
               'load_config', 'get_config', 'print_config']
