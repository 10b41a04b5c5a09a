"""Gemini model factory for VendorGPT agents."""

import google.generativeai as genai

from vendor_gpt.app.config import get_settings


def get_model(
    model_name: str | None = None,
    temperature: float | None = None,
):
    """Return a configured Gemini GenerativeModel instance.

    Args:
        model_name: Gemini model identifier. Defaults to ``settings.gemini_model``.
        temperature: Generation temperature (0.0-2.0). Defaults to
            ``settings.llm_temperature``.

    Returns:
        A ``google.generativeai.GenerativeModel`` ready for generation.
    """
    settings = get_settings()
    genai.configure(api_key=settings.gemini_api_key)

    generation_config = {
        "temperature": settings.llm_temperature if temperature is None else temperature,
    }

    return genai.GenerativeModel(
        model_name=model_name or settings.gemini_model,
        generation_config=generation_config,
    )
