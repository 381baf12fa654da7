"""
Typed views over the JSON configuration blobs.

LoyaltyCard.rules and Business.settings are stored as JSON so merchants can
evolve them without migrations. Code never reads those dicts directly: it
goes through the frozen dataclasses below, which own the defaulting rules.
"""

from dataclasses import asdict, dataclass
from typing import Any


def _positive_int(value: Any) -> int | None:
    """Coerce to a positive int, or None if absent/invalid."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


@dataclass(frozen=True)
class LoyaltyCardRules:
    """Stamp rules of a loyalty card."""

    stamps_required: int
    reward_description: str = ""
    max_stamps_per_day: int | None = None
    expiry_days: int | None = None

    @classmethod
    def from_json(cls, data: dict | None, default_stamps_required: int | None = None) -> "LoyaltyCardRules":
        """
        Build rules from the stored JSON.

        stamps_required falls back to VOLTA["DEFAULT_STAMPS_REQUIRED"] when
        missing or not a positive integer. Limits that are zero, negative or
        malformed mean "no limit".
        """
        data = data or {}
        if default_stamps_required is None:
            from volta.conf import volta_settings

            default_stamps_required = volta_settings.DEFAULT_STAMPS_REQUIRED

        return cls(
            stamps_required=_positive_int(data.get("stamps_required")) or default_stamps_required,
            reward_description=str(data.get("reward_description") or ""),
            max_stamps_per_day=_positive_int(data.get("max_stamps_per_day")),
            expiry_days=_positive_int(data.get("expiry_days")),
        )

    def as_json(self) -> dict:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass(frozen=True)
class BusinessSettings:
    """Per-business settings used by AI generation and pass rendering."""

    business_type: str = "restaurant"
    ai_tone: str = "amigável"
    brand_voice: str = ""

    @classmethod
    def from_json(cls, data: dict | None) -> "BusinessSettings":
        data = data or {}
        return cls(
            business_type=data.get("business_type") or cls.business_type,
            ai_tone=data.get("ai_tone") or cls.ai_tone,
            brand_voice=data.get("brand_voice") or "",
        )


@dataclass(frozen=True)
class CardDesign:
    """Colors of a loyalty card, as rendered on wallet passes."""

    background_color: str = "#8B4513"
    foreground_color: str = "#FFFFFF"
    label_color: str = "#FFFFFF"
    logo_url: str = ""

    @staticmethod
    def _color(value: str) -> str:
        return "#" + value.lstrip("#")

    @classmethod
    def from_json(cls, data: dict | None) -> "CardDesign":
        data = data or {}
        return cls(
            background_color=cls._color(data.get("background_color") or cls.background_color),
            foreground_color=cls._color(data.get("foreground_color") or cls.foreground_color),
            label_color=cls._color(data.get("label_color") or cls.label_color),
            logo_url=data.get("logo_url") or "",
        )
