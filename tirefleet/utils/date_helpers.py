def format_date_display(value: str | None) -> str:
    """Render a canonical ``YYYY-MM-DD`` date as ``DD-MM-YYYY``.

    Empty values render as ``-``; anything not in canonical form is returned
    as-is.
    """
    if not value:
        return "-"
    parts = value.split("-")
    if len(parts) == 3 and len(parts[0]) == 4:
        return f"{parts[2]}-{parts[1]}-{parts[0]}"
    return value
