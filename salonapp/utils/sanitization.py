"""Cleaning of free text typed by anonymous visitors"""


def clean_public_text(value, max_length: int = 255) -> str:
    """
    Trim text from the public booking form and enforce a length cap.

    The text is stored as typed; escaping belongs to whatever renders it.
    Returns "" for blank input. Raises ValueError when the trimmed text is
    longer than max_length.
    """
    text = str(value or "").strip()
    if len(text) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")
    return text
