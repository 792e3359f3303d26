"""In-progress trade entry state.

The draft is owned by the entry surface and is never persisted. It is
permissive on purpose: any value can be set, and problems are reported
all at once when the draft is handed to ``validate`` or ``commit``.
"""

import base64
import mimetypes
import uuid
from datetime import date
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from chronos.constants import POI_VOCABULARY, REVIEW_LIST_FIELDS

_REVIEW_ATTRIBUTES = {
    "mistakes": "mistakes",
    "whatWentWell": "what_went_well",
    "whatWentWrong": "what_went_wrong",
}


def encode_image(path: Path) -> str:
    """Read an image file into a self-contained data URL.

    Args:
        path: Image file to embed.

    Returns:
        ``data:<mime>;base64,<payload>`` string.
    """
    mime, _ = mimetypes.guess_type(path.name)
    payload = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime or 'application/octet-stream'};base64,{payload}"


class DraftReview(BaseModel):
    """Editable psychological review."""

    rules_followed: bool = True
    broken_rule_description: Optional[str] = None
    draw_on_liquidity: str = ""
    htf_narrative: str = ""
    mistakes: list[str] = Field(default_factory=list)
    what_went_well: list[str] = Field(default_factory=list)
    what_went_wrong: list[str] = Field(default_factory=list)
    key_lesson: str = ""


class TradeDraft(BaseModel):
    """Editable trade entry, pre-filled with the entry form defaults."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    pair: str = "NQ"
    date: str = Field(default_factory=lambda: date.today().isoformat())
    entry_time: str = "10:00"
    exit_time: str = "10:30"
    session: str = "NY"
    crt: str = "M15"
    poi: dict[str, list[str]] = Field(
        default_factory=lambda: {category: [] for category in POI_VOCABULARY}
    )
    smt_types: list[str] = Field(default_factory=list)
    entry_type: str = "Confirmation Entry"
    risk: str = "0.5%"
    rr: str = ""
    rating: str = "B"
    result: str = "Small Win"
    images: list[str] = Field(default_factory=list)
    review: DraftReview = Field(default_factory=DraftReview)

    # ==================== Confluences ====================

    def toggle_poi(self, category: str, value: str) -> None:
        """Add a POI confluence if absent, remove it if present.

        Raises:
            ValueError: If ``category`` is not fvg, ob or other.
        """
        if category not in POI_VOCABULARY:
            raise ValueError(
                f"Unknown POI category '{category}'. Use one of: {', '.join(POI_VOCABULARY)}"
            )
        _toggle(self.poi[category], value)

    def toggle_smt(self, value: str) -> None:
        """Add an SMT confluence if absent, remove it if present."""
        _toggle(self.smt_types, value)

    # ==================== Review ====================

    def _review_list(self, list_field: str) -> list[str]:
        if list_field not in REVIEW_LIST_FIELDS:
            raise ValueError(
                f"Unknown review list '{list_field}'. Use one of: {', '.join(REVIEW_LIST_FIELDS)}"
            )
        return getattr(self.review, _REVIEW_ATTRIBUTES[list_field])

    def add_review_item(self, list_field: str, text: str) -> None:
        """Append an item to a review list. Blank text is ignored."""
        items = self._review_list(list_field)
        if text.strip():
            items.append(text)

    def remove_review_item(self, list_field: str, index: int) -> None:
        """Remove the review list item at ``index``."""
        del self._review_list(list_field)[index]

    # ==================== Images ====================

    def attach_image(self, path: Path) -> None:
        """Embed an image file, keeping upload order."""
        self.images.append(encode_image(path))

    def remove_image(self, index: int) -> None:
        del self.images[index]

    def to_candidate(self) -> dict:
        """Build the camelCase candidate mapping for validation."""
        review = self.review
        return {
            "id": self.id,
            "pair": self.pair,
            "date": self.date,
            "entryTime": self.entry_time,
            "exitTime": self.exit_time,
            "session": self.session,
            "crt": self.crt,
            "poi": {category: list(values) for category, values in self.poi.items()},
            "smtTypes": list(self.smt_types),
            "entryType": self.entry_type,
            "risk": self.risk,
            "rr": self.rr,
            "rating": self.rating,
            "result": self.result,
            "images": list(self.images),
            "review": {
                "rulesFollowed": review.rules_followed,
                "brokenRuleDescription": review.broken_rule_description,
                "recap": {
                    "drawOnLiquidity": review.draw_on_liquidity,
                    "htfNarrative": review.htf_narrative,
                },
                "mistakes": list(review.mistakes),
                "whatWentWell": list(review.what_went_well),
                "whatWentWrong": list(review.what_went_wrong),
                "keyLesson": review.key_lesson,
            },
        }


def _toggle(values: list[str], value: str) -> None:
    if value in values:
        values.remove(value)
    else:
        values.append(value)
