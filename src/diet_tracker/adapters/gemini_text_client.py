"""Google Gemini client for text generation."""

from dataclasses import dataclass

from google import genai
from google.genai import types

from diet_tracker.services.ai import TextGenerationClient


@dataclass
class GeminiTextClient(TextGenerationClient):
    """Text generation backed by the Gemini API."""

    client: genai.Client
    temperature: float = 0.7
    max_output_tokens: int = 8192

    @classmethod
    def create(cls, api_key: str) -> "GeminiTextClient":
        """Create a Gemini client for an API key."""
        return cls(client=genai.Client(api_key=api_key))

    async def generate(self, *, model: str, prompt: str) -> str:
        """Call Gemini once and return the text of the first candidate."""
        response = await self.client.aio.models.generate_content(
            model=model,
            contents=[prompt],
            config=types.GenerateContentConfig(
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
            ),
        )
        text = response.text
        if not text:
            raise RuntimeError("Gemini returned an empty response")
        return text
