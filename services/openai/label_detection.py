"""Image label detection via the OpenAI Responses API."""

import base64
import logging
import os
import time
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from services.openai.label_prompts import build_system_prompt, build_user_prompt
from services.openai.label_schema import FUNCTION_DEFINITION, FUNCTION_NAME
from services.openai.response_parser import extract_usage, parse_function_call
from utils.media_validation import sniff_image_mime

LOGGER = logging.getLogger(__name__)
DEFAULT_MODEL = os.getenv("OPENAI_MODEL", "gpt-5")
DEFAULT_MAX_LABELS = 10


class OpenAILabelSource:
    """Derive lowercase search labels for an image with an OpenAI vision model."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI],
        model: str = DEFAULT_MODEL,
        max_labels: int = DEFAULT_MAX_LABELS,
    ) -> None:
        """Initialize the label source.

        Args:
            client: Async OpenAI client used for every request.
            model: Model name passed to the Responses API.
            max_labels: Upper bound on labels kept per image.
        """
        if client is None:
            raise ValueError("OpenAI client must be provided.")
        self.client = client
        self.model = model
        self.max_labels = max(1, max_labels)
        self.system_prompt = build_system_prompt()

    def _encode_image(self, image_bytes: bytes) -> str:
        """Encode image bytes to a base64 data URL string."""
        mime_type = sniff_image_mime(image_bytes)
        encoded = base64.b64encode(image_bytes).decode("utf-8")
        return f"data:{mime_type};base64,{encoded}"

    def _build_input(self, encoded_image: str) -> List[Dict[str, Any]]:
        """Build the model input payload for the responses API."""
        return [
            {
                "type": "message",
                "role": "system",
                "content": [{"type": "input_text", "text": self.system_prompt}],
            },
            {
                "type": "message",
                "role": "user",
                "content": [
                    {"type": "input_text", "text": build_user_prompt(self.max_labels)},
                    {"type": "input_image", "image_url": encoded_image},
                ],
            },
        ]

    async def detect_labels(self, image_bytes: bytes) -> List[str]:
        """Return labels describing the image, lowercased and deduplicated.

        Args:
            image_bytes: Raw bytes of a JPEG, PNG or GIF image.

        Returns:
            Labels in the order the model ranked them.

        Raises:
            ValueError: If the bytes are not an image or the model returns no labels.
            RuntimeError: If the model response holds no label tool call.
        """
        start_time = time.time()
        encoded_image = self._encode_image(image_bytes)

        try:
            response = await self.client.responses.create(
                model=self.model,
                input=self._build_input(encoded_image),
                tools=[FUNCTION_DEFINITION],
                tool_choice={"type": "function", "name": FUNCTION_NAME},
            )
        except Exception as exc:
            LOGGER.error("Error during OpenAI Responses API call: %s", exc)
            raise

        arguments = parse_function_call(response, tool_name=FUNCTION_NAME)
        raw_labels = arguments.get("labels")
        if not isinstance(raw_labels, list):
            raise ValueError("Model returned labels in an unexpected shape.")

        labels = list(dict.fromkeys(
            label.strip().lower() for label in raw_labels if isinstance(label, str) and label.strip()
        ))[: self.max_labels]
        if not labels:
            raise ValueError("No labels were returned for the image.")

        usage = extract_usage(response)
        LOGGER.info(
            "Detected %d labels in %.2fs (input_tokens=%s, output_tokens=%s)",
            len(labels),
            time.time() - start_time,
            usage["input_tokens"],
            usage["output_tokens"],
        )
        return labels
