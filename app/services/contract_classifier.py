"""
Contract Classifier / View Selector
Maps a record's classification onto a presentation state and builds the
type-specific highlight summary. Every lookup falls back to "Not specified".
"""

from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from app.schemas.classification import ClassificationState, ClassificationView, Highlight
from app.schemas.contract import ContractRecord

NOT_SPECIFIED = "Not specified"

_KNOWN_STATES = {
    state.value: state
    for state in ClassificationState
    if state not in (ClassificationState.UNCLASSIFIED, ClassificationState.UNRECOGNIZED)
}


def classify(record: Optional[ContractRecord]) -> ClassificationState:
    """Exact-match the classification against the known contract types"""
    if record is None:
        return ClassificationState.UNCLASSIFIED
    return _KNOWN_STATES.get(record.classification, ClassificationState.UNRECOGNIZED)


def _text(value: Optional[str]) -> str:
    if value is None or not value.strip():
        return NOT_SPECIFIED
    return value


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def format_date(value: Optional[str]) -> str:
    """ISO dates render as 'Jan 05, 2024'; anything else is shown verbatim"""
    if value is None or not value.strip():
        return NOT_SPECIFIED
    parsed = _parse_date(value)
    return parsed.strftime("%b %d, %Y") if parsed else value


def format_money(record: ContractRecord) -> str:
    value = record.key_elements.financial.contract_value
    if value is None or value.amount is None:
        return NOT_SPECIFIED
    amount = value.amount
    amount_text = str(int(amount)) if float(amount).is_integer() else str(amount)
    if value.currency and value.currency.strip():
        return f"{amount_text} {value.currency}"
    return amount_text


def format_parties(record: ContractRecord) -> str:
    companies = [c for c in record.companies() if c.strip()]
    return ", ".join(companies) if companies else NOT_SPECIFIED


def format_duration(record: ContractRecord) -> str:
    dates = record.key_elements.dates
    effective = format_date(dates.effective_date)
    termination = format_date(dates.termination_date)
    if effective == NOT_SPECIFIED and termination == NOT_SPECIFIED:
        return NOT_SPECIFIED

    duration = f"From {effective} to {termination}"
    start, end = _parse_date(dates.effective_date), _parse_date(dates.termination_date)
    if start and end:
        duration += f" ({(end - start).days} days)"
    return duration


def _payment_terms(record: ContractRecord) -> str:
    return _text(record.key_elements.financial.payment_terms)


def _jurisdiction(record: ContractRecord) -> str:
    return _text(record.governing_law().jurisdiction)


def _effective_date(record: ContractRecord) -> str:
    return format_date(record.key_elements.dates.effective_date)


def _licensor(record: ContractRecord) -> str:
    companies = record.companies()
    return _text(companies[0]) if companies else NOT_SPECIFIED


def _license_term(record: ContractRecord) -> str:
    termination = record.key_elements.dates.termination_date
    if termination is None or not termination.strip():
        return NOT_SPECIFIED
    return f"Until {format_date(termination)}"


def _delivery_date(record: ContractRecord) -> str:
    return format_date(record.key_elements.dates.termination_date)


HighlightSpec = List[Tuple[str, Callable[[ContractRecord], str]]]

# state -> (title, description, ordered highlight lookups)
VIEW_LAYOUTS: Dict[ClassificationState, Tuple[str, str, HighlightSpec]] = {
    ClassificationState.SERVICE_AGREEMENT: (
        "Service Agreement Details",
        "Key service delivery terms and conditions",
        [
            ("Service Value", format_money),
            ("Payment Terms", _payment_terms),
            ("Duration", format_duration),
        ],
    ),
    ClassificationState.NDA: (
        "Non-Disclosure Agreement",
        "Confidentiality and information protection terms",
        [
            ("Parties Bound", format_parties),
            ("Jurisdiction", _jurisdiction),
            ("Effective Date", _effective_date),
        ],
    ),
    ClassificationState.EMPLOYMENT_CONTRACT: (
        "Employment Contract",
        "Employment terms and conditions",
        [
            ("Parties", format_parties),
            ("Start Date", _effective_date),
            ("Compensation", format_money),
        ],
    ),
    ClassificationState.LICENSE_AGREEMENT: (
        "License Agreement",
        "Licensing terms and usage rights",
        [
            ("Licensor", _licensor),
            ("License Fee", format_money),
            ("Term", _license_term),
        ],
    ),
    ClassificationState.PURCHASE_ORDER: (
        "Purchase Order",
        "Order details and delivery terms",
        [
            ("Order Value", format_money),
            ("Payment Terms", _payment_terms),
            ("Delivery Date", _delivery_date),
        ],
    ),
}

MANUAL_REVIEW_TITLE = "Manual Review Required"
MANUAL_REVIEW_DESCRIPTION = "The contract type could not be matched to a known category"


def select_view(record: Optional[ContractRecord]) -> ClassificationView:
    """Build the presentation view for a record (or for no record yet)"""
    state = classify(record)
    if record is None:
        return ClassificationView(
            state=state,
            title=MANUAL_REVIEW_TITLE,
            description="No contract has been analyzed yet",
            needs_manual_review=True,
        )

    badge = record.classification.replace("_", " ")
    layout = VIEW_LAYOUTS.get(state)
    if layout is None:
        return ClassificationView(
            state=state,
            title=MANUAL_REVIEW_TITLE,
            description=MANUAL_REVIEW_DESCRIPTION,
            badge=badge,
            needs_manual_review=True,
            has_high_risks=record.has_risk_flags,
        )

    title, description, lookups = layout
    return ClassificationView(
        state=state,
        title=title,
        description=description,
        badge=badge,
        highlights=[Highlight(label=label, value=lookup(record)) for label, lookup in lookups],
        has_high_risks=record.has_risk_flags,
    )
