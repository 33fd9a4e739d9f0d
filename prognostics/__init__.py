"""
Prognostics Model Framework

Model-based prognostics for predicting the remaining useful life (RUL) of
physical components such as batteries, pumps and actuators.
"""

__version__ = "0.1.0"
