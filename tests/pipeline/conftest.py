from __future__ import annotations

import time
from typing import Callable

import pytest

from cvparser.adapters import AdapterDescriptor, RawText, describe
from cvparser.core import FieldExtractionEngine
from cvparser.pipeline import AdapterRegistry, ExtractionOrchestrator
from cvparser.schemas import UploadedDocument

FILLER = "Committed to evidence based work across charities and community groups. " * 5

STRONG_TEXT = (
    "Jane Doe\n"
    "jane.doe@example.com\n"
    "+44 20 7946 0958\n"
    "Senior Policy Advisor at Acme Group\n"
    "\n"
    "Profile\n"
    f"{FILLER}\n"
)
MEDIUM_TEXT = f"Jane Doe\njane.doe@example.com\n{FILLER}\n"
WEAK_TEXT = f"Jane Doe\n{FILLER}\n"
EMAIL_ONLY_TEXT = f"jane.doe@example.com\n{FILLER}\n"


class StubExtractor:
    """Extractor returning canned text or raising a canned error."""

    def __init__(
        self,
        text: str | None = None,
        *,
        error: Exception | None = None,
        delay: float = 0.0,
        on_call: Callable[[], None] | None = None,
    ) -> None:
        self.text = text
        self.error = error
        self.delay = delay
        self.on_call = on_call
        self.calls = 0

    def extract(self, content: bytes, media_type: str | None, filename: str | None) -> RawText:
        self.calls += 1
        if self.on_call is not None:
            self.on_call()
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return RawText(text=self.text or "", source_label="stub")


@pytest.fixture
def text_document() -> UploadedDocument:
    return UploadedDocument(content=b"placeholder", media_type="text/plain", filename="cv.txt")


@pytest.fixture
def stub_descriptor() -> Callable[..., AdapterDescriptor]:
    def factory(adapter_id: str, extractor: StubExtractor, *, priority: int = 1) -> AdapterDescriptor:
        return describe(
            adapter_id,
            extractor,
            media_types=frozenset({"text/plain"}),
            extensions=frozenset({".txt"}),
            priority=priority,
        )

    return factory


@pytest.fixture
def make_orchestrator() -> Callable[..., ExtractionOrchestrator]:
    def factory(descriptors: list[AdapterDescriptor], **kwargs) -> ExtractionOrchestrator:
        return ExtractionOrchestrator(
            registry=AdapterRegistry(descriptors),
            engine=FieldExtractionEngine(),
            **kwargs,
        )

    return factory
