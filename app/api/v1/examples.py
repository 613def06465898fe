"""
Example output endpoints
Show what the analyze endpoint returns for a recognized contract and for one
that needs manual review.
"""

from fastapi import APIRouter

from app.services.contract_classifier import select_view
from app.services.response_normalizer import record_from_payload

router = APIRouter()

SERVICE_AGREEMENT_EXAMPLE = {
    "keyElements": {
        "parties": {
            "companies": ["Northwind Consulting LLC", "Contoso Retail Inc."],
            "signatories": [
                {"name": "Dana Whitfield", "title": "Managing Partner"},
                {"name": "Sam Okafor", "title": "Chief Operating Officer"},
            ],
        },
        "dates": {
            "effectiveDate": "2024-01-01",
            "terminationDate": "2024-12-31",
            "renewalDates": ["2025-01-01"],
        },
        "financial": {
            "contractValue": {"amount": 120000, "currency": "USD"},
            "paymentTerms": "Monthly invoices, net 30",
        },
        "obligations": [
            {"party": "Northwind Consulting LLC", "commitment": "Deliver quarterly inventory audits"},
            {"party": "Contoso Retail Inc.", "commitment": "Provide warehouse access during business hours"},
        ],
        "governingLaw": {"jurisdiction": "New York", "applicableLaw": "Laws of the State of New York"},
    },
    "riskAnalysis": {
        "nonStandardClauses": [
            {
                "clause": "Either party may terminate with 5 days notice",
                "explanation": "Notice period is far shorter than the usual 30 days",
            }
        ],
        "missingClauses": ["Limitation of liability"],
        "unusualTerms": [],
    },
    "classification": "SERVICE_AGREEMENT",
}

UNRECOGNIZED_EXAMPLE = {
    "keyElements": {
        "parties": {"companies": ["Harbor Holdings", "Pier 9 Marina"], "signatories": []},
        "dates": {"effectiveDate": "2024-03-15"},
    },
    "riskAnalysis": {"nonStandardClauses": [], "missingClauses": [], "unusualTerms": []},
    "classification": "OTHER",
}


def _example(payload: dict) -> dict:
    record = record_from_payload(payload)
    return {"record": record.to_json_dict(), "view": select_view(record).model_dump(mode="json")}


@router.get("/service-agreement")
async def example_service_agreement():
    """
    Example output for a recognized service agreement with highlight fields.
    """
    return _example(SERVICE_AGREEMENT_EXAMPLE)


@router.get("/manual-review")
async def example_manual_review():
    """
    Example output for a contract whose type is not in the taxonomy.
    No highlights are produced and manual review is requested.
    """
    return _example(UNRECOGNIZED_EXAMPLE)
