import base64
import json
import logging

from openai import OpenAI

from ecoimpact.core.config import settings

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = (
    "Identify the product shown in the image for an environmental impact estimate.\n"
    "Answer with a JSON object using exactly these keys:\n"
    '  "name": short product name, e.g. "Cotton T-shirt" (never the filename)\n'
    '  "description": one sentence on materials and features\n'
    '  "origin": country of manufacture if printed on the product, else "Unknown"'
)


def extract_product_json_from_image(image_bytes: bytes, mime_type: str) -> dict:
    """Ask the vision model for ``{name, description, origin}``; raises on failure."""
    encoded = base64.b64encode(image_bytes).decode("ascii")
    client = OpenAI(api_key=settings.OPENAI_API_KEY)

    response = client.chat.completions.create(
        model=settings.OPENAI_MODEL,
        response_format={"type": "json_object"},
        messages=[
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": EXTRACTION_PROMPT},
                    {
                        "type": "image_url",
                        "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
                    },
                ],
            }
        ],
        max_tokens=300,
    )

    content = response.choices[0].message.content or "{}"
    logger.debug("Vision model answered: %s", content)
    return json.loads(content)
