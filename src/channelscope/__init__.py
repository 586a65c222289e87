"""
Channelscope - Regression-channel detection for stock price histories.

Fits linear-trend channels (a regression center line with standard-deviation
bounds) to price series and partitions a full history into channels that
describe distinct market regimes.
"""

__version__ = "0.1.0"
