#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Errors and warnings raised by the identification routines"""


class IdentificationError(Exception):
    pass


class InvalidHorizonError(IdentificationError, ValueError):
    """A horizon is non-positive or longer than the available data"""


class OrderTooLargeError(IdentificationError, ValueError):
    """The model order cannot be identified within the chosen horizon"""


class UnsupportedWeightingError(IdentificationError, ValueError):
    pass


class RiccatiNotStabilizableError(IdentificationError):
    """No stabilizing observer gain exists for the estimated (A, C, Q, R, S)"""


class RankDeficiencyWarning(UserWarning):
    pass
