"""Data contracts for the SIP/SWP ledger endpoints."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sipswp.domain.models import LedgerSummary, SimulationConfig, YearRecord
from sipswp.schemas.common import RequestModel


class SimulationRequest(RequestModel):
    """SIP phase inputs followed by the SWP phase inputs."""

    sip: float = Field(1000, ge=0, description="Monthly SIP in the first year.")
    years: int = Field(10, ge=0, le=100, description="Years of SIP contributions.")
    rate: float = Field(12, gt=-100, le=100, description="Expected annual return in percent.")
    stepup: float = Field(10, ge=0, le=100, description="Annual SIP step-up in percent.")

    enableSwp: bool = True
    swpWithdrawal: float = Field(10000, ge=0, description="Monthly SWP in the first withdrawal year.")
    swpStepup: float = Field(10, ge=0, le=100, description="Annual SWP step-up in percent.")
    swpYears: int = Field(20, ge=0, le=100, description="Years of SWP withdrawals after the SIP ends.")

    def to_config(self) -> SimulationConfig:
        return SimulationConfig(
            base_contribution=self.sip,
            contribution_years=self.years,
            annual_return_percent=self.rate,
            contribution_step_up_percent=self.stepup,
            base_withdrawal=self.swpWithdrawal if self.enableSwp else 0.0,
            withdrawal_step_up_percent=self.swpStepup,
            withdrawal_years=self.swpYears if self.enableSwp else 0,
        )


class SimulationResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ledger: List[YearRecord]
    summary: LedgerSummary
