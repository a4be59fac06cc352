"""Schema definition for the image label detection tool."""

from typing import Any, Dict

FUNCTION_NAME = "report_image_labels"

FUNCTION_DEFINITION: Dict[str, Any] = {
    "type": "function",
    "name": FUNCTION_NAME,
    "description": "Return short descriptive labels for the objects, scene and concepts in the image.",
    "parameters": {
        "type": "object",
        "properties": {
            "labels": {
                "type": "array",
                "description": "Labels ordered from most to least confident, one to three words each.",
                "items": {"type": "string"},
            },
        },
        "required": ["labels"],
        "additionalProperties": False,
    },
    "strict": True,
}
