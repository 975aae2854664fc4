"""Validation of the banner editor payload.

Each section is parsed on its own and the cross-field rules read the raw
section values, so a single submission reports every violation at once
(e.g. a blank title, a missing custom height and an invalid CTA link).
On success the result carries the normalized AnnouncementConfig; on failure
it carries only the errors.
"""

import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from storefront_banners.domain.time_utils import is_valid_time, time_to_minutes
from storefront_banners.schemas.announcement_config import (
    CTA_VARIANTS,
    AnnouncementConfig,
    BackgroundSection,
    BasicSection,
    CalendarDate,
    FieldError,
    OtherSection,
    TextSection,
)

logger = logging.getLogger(__name__)

_date_adapter = TypeAdapter(CalendarDate)

SectionParser = Callable[[Mapping[str, Any]], tuple[BaseModel | None, list[FieldError]]]
SectionRule = Callable[[Mapping[str, Any]], list[FieldError]]


@dataclass
class ConfigValidationResult:
    """Either a normalized config or the list of field errors, never both."""

    config: AnnouncementConfig | None = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.config is not None and not self.errors


# ─────────────────────────────────────────────────────────────────────────────
# Value helpers
# ─────────────────────────────────────────────────────────────────────────────


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_number(value: Any) -> float | None:
    """Parse a form value as a finite number, or None if it isn't one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _parse_date(value: Any) -> date | None:
    if _is_blank(value):
        return None
    try:
        return _date_adapter.validate_python(value)
    except PydanticValidationError:
        return None


# ─────────────────────────────────────────────────────────────────────────────
# Cross-field rules (paths are relative to the section)
# ─────────────────────────────────────────────────────────────────────────────


def _check_dimension(
    value: Any,
    field_name: str,
    label: str,
    maximum: float | None = None,
) -> FieldError | None:
    if _is_blank(value):
        return FieldError(path=[field_name], message=f"{label} is required for custom size")
    number = parse_number(value)
    if number is None or number <= 0:
        return FieldError(path=[field_name], message=f"{label} must be a positive number")
    if maximum is not None and number > maximum:
        return FieldError(path=[field_name], message=f"{label} cannot be more than 100%")
    return None


def check_custom_size(basic: Mapping[str, Any]) -> list[FieldError]:
    """Custom banners need a positive height and a width of at most 100%."""
    if basic.get("size") != "custom":
        return []
    errors = [
        _check_dimension(basic.get("sizeHeight"), "sizeHeight", "Height"),
        _check_dimension(basic.get("sizeWidth"), "sizeWidth", "Width", maximum=100),
    ]
    return [e for e in errors if e is not None]


def check_schedule(basic: Mapping[str, Any]) -> list[FieldError]:
    """Specific start/end modes need a date and time, and end must follow start."""
    errors: list[FieldError] = []
    start_specific = basic.get("startType") == "specific"
    end_specific = basic.get("endType") == "specific"

    for prefix, label, specific in (
        ("start", "Start", start_specific),
        ("end", "End", end_specific),
    ):
        if not specific:
            continue
        if _is_blank(basic.get(f"{prefix}Date")):
            errors.append(
                FieldError(
                    path=[f"{prefix}Date"],
                    message=f"{label} date is required when {prefix} type is specific",
                )
            )
        clock = basic.get(f"{prefix}Time")
        if _is_blank(clock):
            errors.append(
                FieldError(
                    path=[f"{prefix}Time"],
                    message=f"{label} time is required when {prefix} type is specific",
                )
            )
        elif not isinstance(clock, str) or not is_valid_time(clock):
            errors.append(
                FieldError(path=[f"{prefix}Time"], message=f"{label} time must be in HH:mm format")
            )

    if not (start_specific and end_specific):
        return errors

    start_date = _parse_date(basic.get("startDate"))
    end_date = _parse_date(basic.get("endDate"))
    if start_date is None or end_date is None:
        return errors

    if start_date > end_date:
        errors.append(FieldError(path=["endDate"], message="End date must be after start date"))
    elif start_date == end_date:
        start_time, end_time = basic.get("startTime"), basic.get("endTime")
        if (
            isinstance(start_time, str)
            and isinstance(end_time, str)
            and is_valid_time(start_time)
            and is_valid_time(end_time)
            and time_to_minutes(start_time) >= time_to_minutes(end_time)
        ):
            errors.append(
                FieldError(path=["endTime"], message="End time must be after start time")
            )
    return errors


# ─────────────────────────────────────────────────────────────────────────────
# Section parsers
# ─────────────────────────────────────────────────────────────────────────────


def _to_field_errors(exc: PydanticValidationError) -> list[FieldError]:
    return [
        FieldError(path=[str(part) for part in err["loc"]], message=err["msg"])
        for err in exc.errors()
    ]


def _model_parser(model: type[BaseModel]) -> SectionParser:
    def parse(raw: Mapping[str, Any]) -> tuple[BaseModel | None, list[FieldError]]:
        try:
            return model.model_validate(raw), []
        except PydanticValidationError as exc:
            return None, _to_field_errors(exc)

    return parse


def parse_cta(raw: Mapping[str, Any]) -> tuple[BaseModel | None, list[FieldError]]:
    """Dispatch on ctaType to the variant that declares its required fields."""
    cta_type = raw.get("ctaType", raw.get("cta_type"))
    variant = CTA_VARIANTS.get(cta_type) if isinstance(cta_type, str) else None
    if variant is None:
        allowed = ", ".join(f"'{name}'" for name in CTA_VARIANTS)
        return None, [FieldError(path=["ctaType"], message=f"CTA type must be one of {allowed}")]
    return _model_parser(variant)(raw)


SECTION_PARSERS: dict[str, SectionParser] = {
    "basic": _model_parser(BasicSection),
    "text": _model_parser(TextSection),
    "cta": parse_cta,
    "background": _model_parser(BackgroundSection),
    "other": _model_parser(OtherSection),
}

SECTION_RULES: dict[str, tuple[SectionRule, ...]] = {
    "basic": (check_custom_size, check_schedule),
}


def validate_announcement_config(raw: Any) -> ConfigValidationResult:
    """Validate an editor payload, collecting violations from every section."""
    if not isinstance(raw, Mapping):
        return ConfigValidationResult(
            errors=[FieldError(path=[], message="Announcement configuration must be an object")]
        )

    errors: list[FieldError] = []
    sections: dict[str, BaseModel] = {}

    for name, parse in SECTION_PARSERS.items():
        section_raw = raw.get(name)
        if section_raw is None:
            errors.append(FieldError(path=[name], message=f"{name.capitalize()} section is required"))
            continue
        if not isinstance(section_raw, Mapping):
            errors.append(FieldError(path=[name], message=f"{name.capitalize()} section must be an object"))
            continue

        parsed, section_errors = parse(section_raw)
        for rule in SECTION_RULES.get(name, ()):
            section_errors.extend(rule(section_raw))

        errors.extend(
            FieldError(path=[name, *error.path], message=error.message) for error in section_errors
        )
        if parsed is not None and not section_errors:
            sections[name] = parsed

    if errors:
        logger.debug(f"Announcement config rejected with {len(errors)} error(s)")
        return ConfigValidationResult(errors=errors)

    return ConfigValidationResult(
        config=AnnouncementConfig.model_validate(
            {name: section.model_dump(by_alias=True) for name, section in sections.items()}
        )
    )
