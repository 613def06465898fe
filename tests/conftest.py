"""
Pytest configuration and fixtures
"""
import asyncio
import io
import json
import os
from typing import List, Optional

import pytest

# Never talk to the real reasoning service from tests
os.environ["OPENAI_API_KEY"] = ""

from pypdf import PdfWriter

from app.schemas.analysis import AnalysisReply, AnalysisRequest
from app.schemas.document import RawDocument


def _escape_pdf_text(line: str) -> str:
    return line.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_text_pdf(lines: List[str]) -> bytes:
    """Build a minimal one-page PDF whose content stream draws `lines` in Helvetica"""
    ops = ["BT", "/F1 12 Tf", "72 720 Td", "14 TL"]
    for line in lines:
        ops.append(f"({_escape_pdf_text(line)}) Tj T*")
    ops.append("ET")
    stream = "\n".join(ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length " + str(len(stream)).encode() + b" >>\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = io.BytesIO()
    out.write(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(out.tell())
        out.write(f"{number} 0 obj\n".encode() + body + b"\nendobj\n")
    xref_at = out.tell()
    out.write(f"xref\n0 {len(objects) + 1}\n".encode())
    out.write(b"0000000000 65535 f \n")
    for offset in offsets:
        out.write(f"{offset:010d} 00000 n \n".encode())
    out.write(f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n".encode())
    out.write(f"startxref\n{xref_at}\n%%EOF\n".encode())
    return out.getvalue()


def build_blank_pdf(pages: int = 1) -> bytes:
    """A PDF with pages but no text, like a scanned image without OCR"""
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=612, height=792)
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


CONTRACT_LINES = [
    "MUTUAL NON-DISCLOSURE AGREEMENT",
    "This Agreement is entered into by Acme Corp and Globex Ltd.",
    "Effective Date: January 1, 2024",
    "Governed by the laws of the State of Delaware.",
]


def full_payload(classification: str = "NDA") -> dict:
    return {
        "keyElements": {
            "parties": {
                "companies": ["Acme Corp", "Globex Ltd"],
                "signatories": [{"name": "Jane Roe", "title": "CEO"}],
            },
            "dates": {
                "effectiveDate": "2024-01-01",
                "terminationDate": "2025-01-01",
                "renewalDates": ["2025-01-01", "2026-01-01"],
            },
            "financial": {
                "contractValue": {"amount": 50000, "currency": "USD"},
                "paymentTerms": "Net 30",
            },
            "obligations": [
                {"party": "Acme Corp", "commitment": "Keep information confidential"},
                {"party": "Globex Ltd", "commitment": "Return materials on request"},
            ],
            "governingLaw": {"jurisdiction": "Delaware", "applicableLaw": "Delaware law"},
        },
        "riskAnalysis": {
            "nonStandardClauses": [{"clause": "Perpetual term", "explanation": "No expiry"}],
            "missingClauses": ["Limitation of liability"],
            "unusualTerms": [{"term": "Unilateral amendment", "concern": "One-sided"}],
        },
        "classification": classification,
    }


def fenced(payload: dict) -> str:
    return "```json\n" + json.dumps(payload) + "\n```"


class FakeAnalysisClient:
    """Stands in for AnalysisClient; records every request it receives"""

    def __init__(self, reply_text: Optional[str] = None, error: Optional[Exception] = None, delay: float = 0.0):
        self.reply_text = reply_text if reply_text is not None else fenced(full_payload())
        self.error = error
        self.delay = delay
        self.requests: List[AnalysisRequest] = []

    async def complete(self, request: AnalysisRequest) -> AnalysisReply:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return AnalysisReply(text=self.reply_text, model="fake-model", finish_reason="stop")


@pytest.fixture
def contract_pdf() -> bytes:
    return build_text_pdf(CONTRACT_LINES)


@pytest.fixture
def contract_document(contract_pdf) -> RawDocument:
    return RawDocument.from_upload(
        contract_pdf, "application/pdf", "nda.pdf", max_size_bytes=10 * 1024 * 1024
    )


@pytest.fixture
def fake_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()
