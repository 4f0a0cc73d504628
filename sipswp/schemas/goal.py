"""Data contracts for goal planning."""

from pydantic import Field

from sipswp.schemas.common import RequestModel


class GoalRequest(RequestModel):
    """Find the step-up that grows ``initialContribution`` into ``target``."""

    target: float = Field(1_000_000)
    initialContribution: float = Field(5000, ge=0)
    years: int = Field(10, ge=1, le=100)
    returnRate: float = Field(12, gt=-100, le=100)


class RequiredContributionRequest(RequestModel):
    """Find the starting monthly SIP for a target with a fixed step-up."""

    targetAmount: float = Field(1_000_000, ge=0)
    investmentPeriod: int = Field(10, ge=1, le=100)
    returnRate: float = Field(12, gt=-100, le=100)
    stepUpRate: float = Field(10, ge=0, le=100)
