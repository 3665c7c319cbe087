from __future__ import annotations

from typing import Any, Iterable


_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def _error_path(location_parts: Iterable[Any]) -> tuple[str, str]:
    parts = [str(part) for part in location_parts]
    if not parts:
        return "body", "(root)"

    location = parts[0] if parts[0] in _REQUEST_LOCATIONS else "body"
    path_parts = parts[1:] if parts[0] in _REQUEST_LOCATIONS else parts
    if not path_parts:
        return location, "(root)"

    # Pydantic reports list positions as separate parts: extras.0.price -> extras[0].price
    path = ""
    for part in path_parts:
        if part.isdigit() and path:
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else part
    return location, path


def _build_summary(*, missing_fields: list[str], error_count: int) -> str:
    if missing_fields:
        return f"Nedostaju obavezna polja: {', '.join(missing_fields)}."
    noun = "polje" if error_count == 1 else "polja"
    return f"Neispravni podaci: {error_count} {noun}."


def format_validation_error_details(errors: list[dict[str, Any]]) -> dict[str, Any]:
    field_errors: list[dict[str, str]] = []
    missing_fields: list[str] = []

    for error in errors:
        raw_loc = error.get("loc")
        if isinstance(raw_loc, (list, tuple)):
            location, path = _error_path(raw_loc)
        elif raw_loc is None:
            location, path = "body", "(root)"
        else:
            location, path = _error_path([raw_loc])

        error_type = str(error.get("type", "validation_error"))
        field_errors.append(
            {
                "path": path,
                "location": location,
                "message": str(error.get("msg", "Invalid value")),
                "errorType": error_type,
            }
        )

        if error_type == "missing" and path not in missing_fields:
            missing_fields.append(path)

    return {
        "summary": _build_summary(missing_fields=missing_fields, error_count=len(field_errors)),
        "missingFields": missing_fields,
        "fieldErrors": field_errors,
    }
