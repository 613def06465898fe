"""
Contract record schemas.

The record mirrors the JSON shape requested from the reasoning service
(camelCase keys). Every nested structure has a default so consumers can
read any field without checking for missing substructure; only
`classification` is required.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ContractType(str, Enum):
    """Closed classification taxonomy sent to the reasoning service"""
    SERVICE_AGREEMENT = "SERVICE_AGREEMENT"
    NDA = "NDA"
    EMPLOYMENT_CONTRACT = "EMPLOYMENT_CONTRACT"
    LICENSE_AGREEMENT = "LICENSE_AGREEMENT"
    PURCHASE_ORDER = "PURCHASE_ORDER"
    OTHER = "OTHER"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Signatory(_CamelModel):
    name: Optional[str] = None
    title: Optional[str] = None


class Parties(_CamelModel):
    companies: List[str] = Field(default_factory=list)
    signatories: List[Signatory] = Field(default_factory=list)


class ContractDates(_CamelModel):
    effective_date: Optional[str] = Field(None, alias="effectiveDate")
    termination_date: Optional[str] = Field(None, alias="terminationDate")
    renewal_dates: List[str] = Field(default_factory=list, alias="renewalDates")


class ContractValue(_CamelModel):
    amount: Optional[float] = None
    currency: Optional[str] = None


class FinancialTerms(_CamelModel):
    contract_value: Optional[ContractValue] = Field(None, alias="contractValue")
    payment_terms: Optional[str] = Field(None, alias="paymentTerms")


class Obligation(_CamelModel):
    party: Optional[str] = None
    commitment: Optional[str] = None


class GoverningLaw(_CamelModel):
    jurisdiction: Optional[str] = None
    applicable_law: Optional[str] = Field(None, alias="applicableLaw")


class KeyElements(_CamelModel):
    parties: Parties = Field(default_factory=Parties)
    dates: ContractDates = Field(default_factory=ContractDates)
    financial: FinancialTerms = Field(default_factory=FinancialTerms)
    obligations: List[Obligation] = Field(default_factory=list)
    governing_law: GoverningLaw = Field(default_factory=GoverningLaw, alias="governingLaw")


class NonStandardClause(_CamelModel):
    clause: Optional[str] = None
    explanation: Optional[str] = None


class UnusualTerm(_CamelModel):
    term: Optional[str] = None
    concern: Optional[str] = None


class RiskAnalysis(_CamelModel):
    non_standard_clauses: List[NonStandardClause] = Field(default_factory=list, alias="nonStandardClauses")
    missing_clauses: List[str] = Field(default_factory=list, alias="missingClauses")
    unusual_terms: List[UnusualTerm] = Field(default_factory=list, alias="unusualTerms")


class ContractRecord(_CamelModel):
    """Validated contract data produced by the response normalizer"""
    key_elements: KeyElements = Field(default_factory=KeyElements, alias="keyElements")
    risk_analysis: RiskAnalysis = Field(default_factory=RiskAnalysis, alias="riskAnalysis")
    classification: str = Field(..., description="Classification exactly as reported by the reasoning service")

    @property
    def contract_type(self) -> Optional[ContractType]:
        """Enum member for the classification, or None when it is not in the taxonomy"""
        try:
            return ContractType(self.classification)
        except ValueError:
            return None

    @property
    def has_risk_flags(self) -> bool:
        return bool(self.risk_analysis.unusual_terms or self.risk_analysis.non_standard_clauses)

    def companies(self) -> List[str]:
        return list(self.key_elements.parties.companies)

    def obligations_for(self, party: Optional[str] = None) -> List[Obligation]:
        obligations = self.key_elements.obligations
        if party is None:
            return list(obligations)
        return [o for o in obligations if o.party == party]

    def missing_clauses(self) -> List[str]:
        return list(self.risk_analysis.missing_clauses)

    def governing_law(self) -> GoverningLaw:
        return self.key_elements.governing_law

    def to_json_dict(self) -> dict:
        """Serialize to the camelCase JSON shape requested from the reasoning service"""
        return self.model_dump(by_alias=True, exclude_none=True)
