"""Data contracts for the sequence-of-returns and survival-grid endpoints."""

from typing import List

from pydantic import Field

from sipswp.schemas.common import RequestModel


class SequenceRiskRequest(RequestModel):
    initialCorpus: float = Field(1_000_000, ge=0)
    monthlyWithdrawal: float = Field(5000, ge=0)
    withdrawalPeriod: int = Field(30, ge=1, le=100)
    withdrawalIncrease: float = Field(5, ge=0, le=100, description="Yearly raise of the withdrawal in percent.")
    avgReturn: float = Field(7, gt=-100, le=100)
    bearReturn: float = Field(-15, gt=-100, le=100, description="Return for the first two years, bad start.")
    bullReturn: float = Field(20, gt=-100, le=100, description="Return for the first two years, good start.")


class SurvivalGridRequest(RequestModel):
    corpus: float = Field(10_000_000, ge=0)
    returnRate: float = Field(8, gt=-100, le=100)
    inflation: float = Field(6, ge=-50, le=100)
    rates: List[float] = Field(default_factory=lambda: [3, 4, 5, 6, 7], min_length=1, max_length=20)
    durations: List[int] = Field(default_factory=lambda: [10, 15, 20, 25, 30], min_length=1, max_length=20)
