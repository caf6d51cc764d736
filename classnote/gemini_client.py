import asyncio
import logging
from google import genai
from classnote.errors import GenerationError

logger = logging.getLogger(__name__)

RETRYABLE_MARKERS = ("429", "RESOURCE_EXHAUSTED", "503", "overloaded", "UNAVAILABLE")

class GeminiClient:
    def __init__(self, api_key: str = None, model: str = "gemini-2.5-flash", max_retries: int = 5):
        self.model = model
        self.max_retries = max_retries
        if not api_key:
            logger.warning("GEMINI_API_KEY not set, evaluation generation is unavailable")
            self.client = None
        else:
            self.client = genai.Client(api_key=api_key)

    async def generate_content(self, prompt: str) -> str:
        if not self.client:
            raise GenerationError("Gemini API key missing")

        for attempt in range(self.max_retries):
            try:
                response = await self.client.aio.models.generate_content(
                    model=self.model,
                    contents=prompt
                )
                return response.text or ""
            except Exception as e:
                error_str = str(e)
                # Quota (rate limit) or server overload
                if any(marker in error_str for marker in RETRYABLE_MARKERS) and attempt < self.max_retries - 1:
                    wait_time = 5 * (attempt + 1)
                    logger.warning(
                        f"Gemini busy (attempt {attempt + 1}/{self.max_retries}), retrying in {wait_time}s: {error_str[:100]}"
                    )
                    await asyncio.sleep(wait_time)
                    continue
                raise GenerationError(f"Gemini request failed: {error_str}") from e
        raise GenerationError("Gemini still busy after retries")
