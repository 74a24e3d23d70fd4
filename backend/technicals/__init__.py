"""
StockPro Technicals

Technical-analysis core: moving averages, momentum, MACD and Bollinger Bands
fused into one composite trading signal.
"""

__version__ = "0.1.0"
