"""
Tests for the response normalizer
"""
import json

import pytest

from app.core.errors import MalformedReplyError, PipelineErrorType
from app.schemas.analysis import AnalysisReply
from app.schemas.contract import (
    ContractDates,
    ContractRecord,
    ContractType,
    ContractValue,
    FinancialTerms,
    GoverningLaw,
    KeyElements,
    NonStandardClause,
    Obligation,
    Parties,
    RiskAnalysis,
    Signatory,
    UnusualTerm,
)
from app.services.response_normalizer import (
    normalize_reply,
    parse_json_object,
    record_from_payload,
    strip_code_fences,
)
from conftest import fenced, full_payload


@pytest.mark.parametrize(
    "raw",
    [
        '```json\n{"classification": "NDA"}\n```',
        '```\n{"classification": "NDA"}\n```',
        '  ```JSON\n{"classification": "NDA"}\n```  \n',
        '{"classification": "NDA"}',
        "```json\n```json\n{}\n```\n```",
        "not json at all",
        "",
        "```",
        "   \n\t",
    ],
)
def test_strip_code_fences_is_idempotent(raw):
    once = strip_code_fences(raw)
    assert strip_code_fences(once) == once


def test_strip_code_fences_removes_json_fence():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'


def test_strip_code_fences_without_fence_only_trims():
    assert strip_code_fences('  {"a": 1}\n') == '{"a": 1}'


def test_parse_json_object_recovers_object_from_prose():
    parsed = parse_json_object('Here is the analysis:\n{"classification": "NDA"}\nLet me know!')
    assert parsed == {"classification": "NDA"}


def test_parse_json_object_rejects_non_object():
    with pytest.raises(ValueError):
        parse_json_object("[1, 2, 3]")


def test_parse_json_object_skips_braces_that_are_not_json():
    parsed = parse_json_object('Result for {Acme}: {"classification": "NDA"} as requested')
    assert parsed == {"classification": "NDA"}


def test_parse_json_object_without_any_object():
    with pytest.raises(ValueError):
        parse_json_object("Result for {Acme} and {Globex}")


def test_scenario_a_fenced_nda_reply():
    record = normalize_reply(AnalysisReply(text=fenced(full_payload("NDA"))))
    assert record.classification == "NDA"
    assert record.contract_type is ContractType.NDA
    assert record.companies() == ["Acme Corp", "Globex Ltd"]
    assert record.key_elements.financial.contract_value.amount == 50000.0
    assert record.key_elements.financial.contract_value.currency == "USD"


def test_scenario_b_not_json_is_malformed():
    with pytest.raises(MalformedReplyError) as exc_info:
        normalize_reply(AnalysisReply(text="not json at all"))
    assert exc_info.value.error_type is PipelineErrorType.MALFORMED_REPLY
    assert exc_info.value.raw_reply == "not json at all"
    assert exc_info.value.user_message == "Response could not be parsed"


def test_scenario_c_unknown_classification_is_accepted():
    payload = full_payload("SOMETHING_ELSE")
    record = normalize_reply(AnalysisReply(text=json.dumps(payload)))
    assert record.classification == "SOMETHING_ELSE"
    assert record.contract_type is None


def test_missing_classification_is_malformed():
    payload = full_payload()
    del payload["classification"]
    with pytest.raises(MalformedReplyError):
        normalize_reply(AnalysisReply(text=json.dumps(payload)))


def test_truncated_reply_is_malformed():
    text = fenced(full_payload())[:120]
    with pytest.raises(MalformedReplyError) as exc_info:
        normalize_reply(AnalysisReply(text=text, finish_reason="length"))
    assert exc_info.value.diagnostic == text


def test_minimal_reply_gets_safe_defaults():
    record = normalize_reply(AnalysisReply(text='{"classification": "NDA"}'))
    assert record.companies() == []
    assert record.obligations_for() == []
    assert record.missing_clauses() == []
    assert record.governing_law().jurisdiction is None
    assert record.key_elements.financial.contract_value is None
    assert record.key_elements.dates.effective_date is None
    assert record.has_risk_flags is False


def test_wrong_shapes_are_tolerated():
    payload = {
        "classification": "PURCHASE_ORDER",
        "keyElements": {
            "parties": {"companies": "Acme Corp", "signatories": ["Jane", {"name": "Bob"}]},
            "dates": [],
            "financial": {"contractValue": {"amount": "12,500.50", "currency": "EUR"}, "paymentTerms": 30},
            "obligations": [None, {"party": "Acme Corp"}],
            "governingLaw": None,
        },
        "riskAnalysis": {"missingClauses": ["Indemnity", None, 3]},
    }
    record = record_from_payload(payload)
    assert record.companies() == []
    assert [s.name for s in record.key_elements.parties.signatories] == ["Bob"]
    assert record.key_elements.financial.contract_value.amount == 12500.5
    assert record.key_elements.financial.payment_terms == "30"
    assert len(record.obligations_for()) == 1
    assert record.obligations_for()[0].commitment is None
    assert record.missing_clauses() == ["Indemnity", "3"]


def test_obligations_filtered_by_party():
    record = record_from_payload(full_payload())
    commitments = [o.commitment for o in record.obligations_for("Globex Ltd")]
    assert commitments == ["Return materials on request"]


def test_round_trip_serialization():
    original = record_from_payload(full_payload("LICENSE_AGREEMENT"))
    serialized = json.dumps(original.to_json_dict())
    assert normalize_reply(AnalysisReply(text=serialized)) == original


def test_round_trip_with_omitted_subtrees():
    original = ContractRecord(classification="EMPLOYMENT_CONTRACT")
    serialized = fenced(original.to_json_dict())
    assert normalize_reply(AnalysisReply(text=serialized)) == original


_CONTRACT_VALUES = [None, ContractValue(), ContractValue(amount=1200.5), ContractValue(currency="EUR")]
_PARTIES = [Parties(), Parties(companies=["Acme Corp", ""], signatories=[Signatory(), Signatory(title="CFO")])]
_DATES = [ContractDates(), ContractDates(termination_date="2026-06-30", renewal_dates=["2027-06-30"])]
_OBLIGATIONS = [[], [Obligation(), Obligation(party="Globex Ltd")]]
_GOVERNING_LAWS = [GoverningLaw(), GoverningLaw(applicable_law="English law")]
_RISKS = [
    RiskAnalysis(),
    RiskAnalysis(
        non_standard_clauses=[NonStandardClause(clause="Auto renewal")],
        missing_clauses=["Force majeure"],
        unusual_terms=[UnusualTerm(concern="Vague")],
    ),
]


def _record_variants():
    for i, contract_value in enumerate(_CONTRACT_VALUES):
        for j, parties in enumerate(_PARTIES):
            for k, risk in enumerate(_RISKS):
                flip = (i + j + k) % 2
                yield ContractRecord(
                    classification=["NDA", "SOMETHING_ELSE"][flip],
                    key_elements=KeyElements(
                        parties=parties,
                        dates=_DATES[flip],
                        financial=FinancialTerms(
                            contract_value=contract_value,
                            payment_terms=[None, "Net 60"][j],
                        ),
                        obligations=_OBLIGATIONS[1 - flip],
                        governing_law=_GOVERNING_LAWS[k],
                    ),
                    risk_analysis=risk,
                )


@pytest.mark.parametrize("original", list(_record_variants()))
def test_round_trip_with_optional_fields_left_empty(original):
    serialized = fenced(original.to_json_dict())
    assert normalize_reply(AnalysisReply(text=serialized)) == original


def test_empty_contract_value_survives_round_trip():
    original = ContractRecord(
        classification="NDA",
        key_elements=KeyElements(financial=FinancialTerms(contract_value=ContractValue())),
    )
    assert original.to_json_dict()["keyElements"]["financial"]["contractValue"] == {}
    restored = normalize_reply(AnalysisReply(text=json.dumps(original.to_json_dict())))
    assert restored.key_elements.financial.contract_value == ContractValue()


def test_missing_clauses_are_returned_in_order():
    record = record_from_payload(full_payload())
    assert record.missing_clauses() == ["Limitation of liability"]
    record.missing_clauses().append("Indemnity")
    assert record.missing_clauses() == ["Limitation of liability"]


def test_serialized_shape_uses_camel_case():
    data = record_from_payload(full_payload()).to_json_dict()
    assert set(data) == {"keyElements", "riskAnalysis", "classification"}
    assert data["keyElements"]["dates"]["effectiveDate"] == "2024-01-01"
    assert data["keyElements"]["governingLaw"]["applicableLaw"] == "Delaware law"
    assert data["riskAnalysis"]["nonStandardClauses"][0]["clause"] == "Perpetual term"
