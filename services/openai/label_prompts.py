"""Prompt builders for image label detection."""


def build_system_prompt() -> str:
    """Return the system prompt for the label detector."""
    return (
        "You are an image tagging assistant for a searchable image library. "
        "Describe what is visible with short, generic, lowercase labels that a person "
        "would type into a search box (for example: cat, animal, beach, sunset, car)."
    )


def build_user_prompt(max_labels: int) -> str:
    """Return the user prompt asking for at most ``max_labels`` labels."""
    return (
        f"List up to {max_labels} labels for this image, most confident first. "
        "Include the main subject, its broader category and the setting. "
        "Do not repeat labels and do not add explanations."
    )
