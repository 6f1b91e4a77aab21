"""
Portal policy model with defaults; kept pure (no file IO here).
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PortalPolicies:
    version: str = "1.0.0"
    # Map calibration
    minCalibrationPoints: int = 3
    jitterSpan: float = 8.0
    boundsPadding: float = 20.0
    positionDecimals: int = 1
    # Tactics board hit-testing
    pathEraseRadius: float = 20.0
    arrowEraseThreshold: float = 15.0
    minArrowSpan: float = 20.0
    historyLimit: int = 20
    # Invoices
    defaultCurrency: str = "EUR"
