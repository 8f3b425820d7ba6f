"""Menu rendering and selection parsing for the label catalog."""
import re
from typing import List, Optional, Sequence

from spo_labeler.models import SensitivityLabel

_CHOICE_RE = re.compile(r"^\s*\d+\s*$")


def render_catalog(labels: Sequence[SensitivityLabel]) -> List[str]:
    """Number the labels from 1 in the order given."""
    lines = []
    for n, label in enumerate(labels, start=1):
        if label.content_type:
            lines.append(f"{n}. {label.display_name} ({label.content_type})")
        else:
            lines.append(f"{n}. {label.display_name}")
    return lines


def parse_selection(raw: Optional[str], size: int) -> Optional[int]:
    """Return the 0-based index for a 1-based answer, or None to exit."""
    if raw is None or not _CHOICE_RE.match(raw):
        return None
    choice = int(raw)
    if 1 <= choice <= size:
        return choice - 1
    return None
