"""Load and validate timetable input from JSON files."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from ..exceptions import CapacityExceededError, InputValidationError
from .models import GridConfig, TimetableInput

CONFIG_FIELDS = list(GridConfig.model_fields)


def load_timetable_from_json(path: Union[str, Path]) -> TimetableInput:
    """
    Load and validate timetable input from a JSON file.

    Keys may be camelCase or snake_case. Grid settings may be given in a
    nested "config" object or at the top level.

    Args:
        path: Path to the JSON file

    Returns:
        Validated TimetableInput model

    Raises:
        FileNotFoundError: If the file doesn't exist
        InputValidationError: If the file isn't valid JSON or fails validation
    """
    path = Path(path)

    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InputValidationError(f"Invalid JSON in {path}: {e}") from e

    return load_timetable_from_dict(data)


def load_timetable_from_dict(data: Any) -> TimetableInput:
    """Validate raw input data into a TimetableInput."""
    if not isinstance(data, dict):
        raise InputValidationError("Input must be a JSON object")

    converted_data = _convert_keys_to_snake_case(data)

    # Move top-level config fields into config object
    config_data = converted_data.get("config") or {}
    if not isinstance(config_data, dict):
        raise InputValidationError("'config' must be a JSON object")
    config_data = dict(config_data)
    for field in CONFIG_FIELDS:
        if field in converted_data:
            config_data[field] = converted_data.pop(field)

    if config_data:
        converted_data["config"] = config_data

    try:
        return TimetableInput.model_validate(converted_data)
    except ValidationError as e:
        raise InputValidationError(str(e)) from e


def check_capacity(input_data: TimetableInput) -> None:
    """
    Reject inputs whose total required hours cannot fit the grid.

    One slot per day is reserved for lunch, so the capacity is
    days * (slots_per_day - 1).

    Raises:
        CapacityExceededError: If the required total exceeds the capacity
    """
    required = input_data.total_required_occurrences
    available = input_data.available_slots
    if required > available:
        raise CapacityExceededError(required, available)


def capacity_warnings(input_data: TimetableInput) -> list[str]:
    """
    Find obvious reasons the search cannot succeed even when the total fits.

    These are advisory: the backtracking search is still the authority.
    """
    warnings = []
    days = input_data.config.days
    cap = input_data.config.max_teacher_periods_per_day

    # A subject appears at most once per day
    for subject in input_data.subjects:
        if subject.required_occurrences > days:
            warnings.append(
                f"Subject '{subject.name}' needs {subject.required_occurrences} periods "
                f"but can appear at most once on each of {days} days"
            )

    # Teacher daily cap over the whole week
    for teacher in input_data.teachers:
        load = sum(s.required_occurrences for s in input_data.get_teacher_subjects(teacher))
        week_cap = min(cap, input_data.config.usable_slots_per_day) * days
        if load > week_cap:
            warnings.append(
                f"Teacher '{teacher}' has {load} periods but at most {week_cap} fit in a week"
            )

    return warnings


def save_timetable_input(input_data: TimetableInput, filepath: Union[str, Path]) -> None:
    """Write input data as camelCase JSON."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as f:
        json.dump(timetable_input_to_dict(input_data), f, indent=2)


def timetable_input_to_dict(input_data: TimetableInput) -> dict:
    """Serialize input data with camelCase keys."""
    data = input_data.model_dump(mode="json", by_alias=True)
    return _convert_keys_to_camel_case(data)


def _to_snake_case(name: str) -> str:
    name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    name = re.sub(r'([a-z\d])([A-Z])', r'\1_\2', name)
    return name.lower()


def _to_camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _convert_keys_to_snake_case(obj: Any) -> Any:
    """Recursively convert dictionary keys from camelCase to snake_case."""
    if isinstance(obj, dict):
        return {_to_snake_case(k): _convert_keys_to_snake_case(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_convert_keys_to_snake_case(item) for item in obj]
    else:
        return obj


def _convert_keys_to_camel_case(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {_to_camel_case(k): _convert_keys_to_camel_case(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_convert_keys_to_camel_case(item) for item in obj]
    else:
        return obj
