"""Prediction providers."""

from .bash import BashUtilPredictor
from .interface import Predictor
from .registry import PredictorRegistry

__all__ = ["BashUtilPredictor", "Predictor", "PredictorRegistry"]
