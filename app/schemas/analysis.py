"""
Reasoning service request/reply types
"""

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class AnalysisRequest:
    """
    Prompt sent to the reasoning service.

    The prompt is always instructions, then schema, then the delimited
    contract text, in that order.
    """
    instructions: str
    schema: str
    contract_text: str

    @property
    def prompt(self) -> str:
        return "\n\n".join([self.instructions, self.schema, self.contract_text])

    def messages(self) -> List[Dict[str, str]]:
        """Chat-completion payload for the request"""
        return [{"role": "user", "content": self.prompt}]


@dataclass(frozen=True)
class AnalysisReply:
    """Raw, untrusted text returned by the reasoning service"""
    text: str
    model: Optional[str] = None
    finish_reason: Optional[str] = None
    prompt_tokens: Optional[int] = None
    completion_tokens: Optional[int] = None

    @property
    def truncated(self) -> bool:
        return self.finish_reason == "length"
