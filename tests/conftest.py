"""Pytest configuration and shared fixtures."""
import sys
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional
from unittest.mock import MagicMock

import pytest

# Add repository root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from spo_labeler.errors import LabelResolutionError
from spo_labeler.models import FeatureFlag, SensitivityLabel, SiteTarget, TenantFeatureFlags
from spo_labeler.prompts import Prompter, is_yes
from spo_labeler.sessions import Sessions


class FakeTenant:
    """In-memory tenant settings. `sticky=False` makes enable calls not take effect."""

    def __init__(self, aip: bool = True, pdf: bool = True, sticky: bool = True):
        self.values = {"aip_integration": aip, "pdf_sensitivity_labeling": pdf}
        self.sticky = sticky
        self.reads: List[str] = []
        self.writes: List[tuple] = []
        self.rest = MagicMock()

    def get_flags(self) -> TenantFeatureFlags:
        return TenantFeatureFlags(self.values["aip_integration"], self.values["pdf_sensitivity_labeling"])

    def get_flag(self, flag: FeatureFlag) -> bool:
        self.reads.append(flag.name)
        return self.values[flag.name]

    def set_flag(self, flag: FeatureFlag, value: bool) -> None:
        self.writes.append((flag.name, value))
        if self.sticky:
            self.values[flag.name] = value


class FakeLabels:
    def __init__(self, catalog: List[tuple], ids: Optional[Dict[str, str]] = None):
        self.catalog = catalog
        self.ids = ids if ids is not None else {name: f"id-{name.lower()}" for name, _ in catalog}
        self.list_calls = 0
        self.resolve_calls: List[str] = []
        self.rest = MagicMock()

    def list_labels(self) -> List[SensitivityLabel]:
        self.list_calls += 1
        return [SensitivityLabel(name, ctype) for name, ctype in self.catalog]

    def resolve_label_id(self, display_name: str) -> str:
        self.resolve_calls.append(display_name)
        if display_name not in self.ids:
            raise LabelResolutionError(f"Sensitivity label '{display_name}' was not found")
        return self.ids[display_name]


class FakeSites:
    def __init__(self, readback: Optional[str] = None, error: Optional[Exception] = None):
        self.assignments: List[tuple] = []
        self.readback = readback
        self.error = error
        self.read_calls = 0
        self.rest = MagicMock()

    def set_default_label(self, site_url: str, label_id: str, library: str = "Documents") -> None:
        if self.error is not None:
            raise self.error
        self.assignments.append((site_url, label_id, library))

    def get_default_label(self, site_url: str, library: str = "Documents") -> Optional[str]:
        self.read_calls += 1
        if self.readback is not None:
            return self.readback
        return self.assignments[-1][1] if self.assignments else None


class ScriptedPrompter(Prompter):
    """Replays fixed answers in order; records every question and message."""

    def __init__(self, answers: Iterable[str] = ()):
        self._answers: Iterator[str] = iter(answers)
        self.questions: List[str] = []
        self.messages: List[str] = []

    def confirm(self, question: str) -> bool:
        return is_yes(self.ask(question))

    def ask(self, question: str) -> str:
        self.questions.append(question)
        return next(self._answers, "")

    def show(self, message: str) -> None:
        self.messages.append(message)


def make_sessions(tenant=None, labels=None, sites=None) -> Sessions:
    return Sessions(
        labels=labels or FakeLabels([("Confidential", "File, Email")]),
        tenant=tenant or FakeTenant(),
        sites=sites or FakeSites(),
    )


@pytest.fixture
def target() -> SiteTarget:
    return SiteTarget("Contoso", "Finance")


@pytest.fixture
def mock_response():
    """Factory for requests.Response look-alikes."""
    def _make(status_code: int = 200, payload=None, text: str = ""):
        resp = MagicMock()
        resp.status_code = status_code
        resp.reason = "OK" if status_code < 400 else "Forbidden"
        resp.json.return_value = payload if payload is not None else {}
        resp.content = b"{}" if payload is not None else b""
        resp.text = text
        return resp
    return _make
