"""
Image description via OpenAI vision.

Purely cosmetic text shown next to an upload. Nothing in the stroke pipeline
reads it, so every failure degrades to PLACEHOLDER instead of raising.
"""
import os
import logging
from openai import OpenAI
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("description")

PLACEHOLDER = "Image analysis unavailable"

DESCRIPTION_PROMPT = (
    "Analyze this image and describe its main features, edges, and contours. "
    "Focus on the most important visual elements that would make a good line drawing. "
    "Keep your response brief - just describe what you see."
)

# The upload waits on this call, so a slow service must give up quickly
REQUEST_TIMEOUT = float(os.environ.get("DESCRIPTION_TIMEOUT", "15"))
MAX_RETRIES = 1


def build_client() -> OpenAI:
    return OpenAI(timeout=REQUEST_TIMEOUT, max_retries=MAX_RETRIES)


# Client Initialization
try:
    client = build_client()
except Exception as e:
    logger.warning("Failed to initialize OpenAI client: %s", e)
    client = None


def get_client():
    return client


def describe_image(data_url: str) -> str:
    active = get_client()
    if not active:
        logger.info("No OpenAI client configured (check OPENAI_API_KEY); using placeholder")
        return PLACEHOLDER

    try:
        response = active.chat.completions.create(
            model=os.environ.get("DESCRIPTION_MODEL", "gpt-4o-mini"),
            messages=[
                {"role": "user", "content": [
                    {"type": "text", "text": DESCRIPTION_PROMPT},
                    {"type": "image_url", "image_url": {"url": data_url}},
                ]}
            ],
            max_tokens=200,
        )
        content = response.choices[0].message.content
        return content or ""
    except Exception:
        logger.exception("OpenAI description request failed")
        return PLACEHOLDER
