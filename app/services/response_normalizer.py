"""
Response Normalizer
The only conversion boundary from untrusted reasoning-service text to a
ContractRecord. Strips markdown fences, parses (and if needed recovers) the
JSON object, and maps it onto the record through lenient accessors.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from app.core.errors import MalformedReplyError
from app.schemas.analysis import AnalysisReply
from app.schemas.contract import (
    ContractDates,
    ContractRecord,
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

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"\A\s*```(?i:json)?[ \t]*(?:\r?\n)?")
_TRAILING_FENCE = re.compile(r"(?:\r?\n)?[ \t]*```\s*\Z")
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def strip_code_fences(text: str) -> str:
    """
    Remove wrapping markdown code fences and surrounding whitespace.

    Applied until nothing changes, so stripping an already-stripped string is
    a no-op.
    """
    current = text
    while True:
        stripped = _LEADING_FENCE.sub("", current, count=1)
        stripped = _TRAILING_FENCE.sub("", stripped, count=1).strip()
        if stripped == current:
            return stripped
        current = stripped


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Parse text as a JSON object, recovering the first object embedded in
    surrounding prose when strict parsing fails.

    Raises:
        ValueError: If no JSON object can be decoded
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        parsed = _recover_embedded_object(text)
        if parsed is None:
            raise ValueError(f"Reply is not valid JSON: {e}") from e
        logger.warning("Reply was not strict JSON; recovered the embedded object")

    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _recover_embedded_object(text: str) -> Optional[Dict[str, Any]]:
    """Decode the first JSON object found at any `{` in the text"""
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            parsed, _end = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, dict):
            return parsed
        start = text.find("{", start + 1)
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _as_amount(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _NUMBER.search(value.replace(",", ""))
        if match:
            return float(match.group(0))
    return None


def _str_list(value: Any) -> List[str]:
    return [s for s in (_as_str(item) for item in _as_list(value)) if s is not None]


def _dict_items(value: Any) -> List[Dict[str, Any]]:
    return [item for item in _as_list(value) if isinstance(item, dict)]


def _contract_value(value: Any) -> Optional[ContractValue]:
    if isinstance(value, (int, float, str)) and not isinstance(value, bool):
        amount = _as_amount(value)
        return ContractValue(amount=amount) if amount is not None else None
    if not isinstance(value, dict):
        return None
    return ContractValue(amount=_as_amount(value.get("amount")), currency=_as_str(value.get("currency")))


def _key_elements(value: Any) -> KeyElements:
    data = _as_dict(value)
    parties = _as_dict(data.get("parties"))
    dates = _as_dict(data.get("dates"))
    financial = _as_dict(data.get("financial"))
    governing_law = _as_dict(data.get("governingLaw"))

    return KeyElements(
        parties=Parties(
            companies=_str_list(parties.get("companies")),
            signatories=[
                Signatory(name=_as_str(s.get("name")), title=_as_str(s.get("title")))
                for s in _dict_items(parties.get("signatories"))
            ],
        ),
        dates=ContractDates(
            effective_date=_as_str(dates.get("effectiveDate")),
            termination_date=_as_str(dates.get("terminationDate")),
            renewal_dates=_str_list(dates.get("renewalDates")),
        ),
        financial=FinancialTerms(
            contract_value=_contract_value(financial.get("contractValue")),
            payment_terms=_as_str(financial.get("paymentTerms")),
        ),
        obligations=[
            Obligation(party=_as_str(o.get("party")), commitment=_as_str(o.get("commitment")))
            for o in _dict_items(data.get("obligations"))
        ],
        governing_law=GoverningLaw(
            jurisdiction=_as_str(governing_law.get("jurisdiction")),
            applicable_law=_as_str(governing_law.get("applicableLaw")),
        ),
    )


def _risk_analysis(value: Any) -> RiskAnalysis:
    data = _as_dict(value)
    return RiskAnalysis(
        non_standard_clauses=[
            NonStandardClause(clause=_as_str(c.get("clause")), explanation=_as_str(c.get("explanation")))
            for c in _dict_items(data.get("nonStandardClauses"))
        ],
        missing_clauses=_str_list(data.get("missingClauses")),
        unusual_terms=[
            UnusualTerm(term=_as_str(t.get("term")), concern=_as_str(t.get("concern")))
            for t in _dict_items(data.get("unusualTerms"))
        ],
    )


def record_from_payload(payload: Dict[str, Any]) -> ContractRecord:
    """
    Map a parsed reply object onto a ContractRecord.

    Only `classification` is required. Unknown classification strings are
    kept as-is; deciding what they mean is the classifier's job.

    Raises:
        ValueError: If classification is missing or not a string
    """
    classification = payload.get("classification")
    if not isinstance(classification, str):
        raise ValueError("Reply has no string 'classification' field")

    return ContractRecord(
        key_elements=_key_elements(payload.get("keyElements")),
        risk_analysis=_risk_analysis(payload.get("riskAnalysis")),
        classification=classification,
    )


def normalize_reply(reply: AnalysisReply) -> ContractRecord:
    """
    Turn a raw reasoning-service reply into a ContractRecord.

    Raises:
        MalformedReplyError: If the reply cannot be parsed into a record. The
            raw reply is attached for diagnostics.
    """
    cleaned = strip_code_fences(reply.text)
    try:
        payload = parse_json_object(cleaned)
        record = record_from_payload(payload)
    except ValueError as e:
        logger.error(f"Failed to normalize analysis reply: {e}. Raw reply: {reply.text[:500]!r}")
        raise MalformedReplyError(f"Malformed analysis reply: {e}", raw_reply=reply.text) from e

    logger.info(f"Normalized contract record (classification={record.classification!r})")
    return record
