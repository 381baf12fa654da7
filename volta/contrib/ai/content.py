"""Value types for AI generation."""

from dataclasses import asdict, dataclass
from typing import ClassVar, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Generated(Generic[T]):
    """Content written by the model."""

    value: T
    is_fallback: ClassVar[bool] = False


@dataclass(frozen=True)
class Fallback(Generic[T]):
    """Canned content used because generation failed (``reason`` says why)."""

    value: T
    reason: str
    is_fallback: ClassVar[bool] = True


@dataclass(frozen=True)
class BusinessContext:
    """What the model is told about the business."""

    business_name: str
    business_type: str = "restaurant"
    ai_tone: str = "amigável"
    brand_voice: str = ""
    total_customers: int = 0
    total_cards: int = 0
    stamps_this_week: int = 0
    new_customers_this_week: int = 0
    completed_cards_this_week: int = 0

    def as_json(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CampaignContent:
    title: str
    message: str
    expected_results: str = ""
    image_prompt: str = ""

    @classmethod
    def from_json(cls, data: dict) -> "CampaignContent":
        """
        Build from the model's JSON (camelCase or snake_case keys).

        Raises:
            ValueError: If title or message is missing
        """
        if not isinstance(data, dict):
            raise ValueError("Campaign reply is not a JSON object")
        title = data.get("title")
        message = data.get("message")
        if not title or not message:
            raise ValueError("Campaign reply without title/message")
        return cls(
            title=str(title),
            message=str(message),
            expected_results=str(data.get("expected_results") or data.get("expectedResults") or ""),
            image_prompt=str(data.get("image_prompt") or data.get("imagePrompt") or ""),
        )

    def as_json(self) -> dict:
        return asdict(self)
