"""AI summarization providers for critical announcements."""

from typing import Protocol

import httpx
from loguru import logger

from stockflow.config import AIConfig
from stockflow.exceptions import ConfigurationError, SummarizationError

GROQ_PROMPT = """You are a financial analyst. Summarize this corporate announcement for a retail investor.

Company: {company}
Announcement: {text}

Output requirements:
- Short bullet points.
- Extract all important details.
- Fetch the numbers if present.
"""

GEMINI_PROMPT = """You are a financial analyst. Summarize this corporate announcement for a retail investor.
Company: {company}
Announcement: {text}
Output requirements:
- exactly 3 short bullet points.
- If it mentions numbers, highlight them.
- Keep it under 50 words total."""


class Summarizer(Protocol):
    """Turns announcement text into a short summary or raises."""

    async def summarize(self, text: str, symbol: str, company_name: str) -> str:
        """Summarize announcement text.

        Raises:
            SummarizationError: On any provider failure
        """
        ...


class GroqSummarizer:
    """Groq chat completions (OpenAI-compatible API)."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        model: str = "llama-3.3-70b-versatile",
        base_url: str = "https://api.groq.com/openai/v1",
        timeout: float = 15.0,
    ) -> None:
        self.client = client
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def summarize(self, text: str, symbol: str, company_name: str) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "user", "content": GROQ_PROMPT.format(company=company_name, text=text)}
            ],
            "temperature": 0.2,
            "max_tokens": 120,
        }

        try:
            response = await self.client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            summary = response.json()["choices"][0]["message"]["content"]
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as e:
            raise SummarizationError(f"Groq request failed for {symbol}: {e}") from e

        if not isinstance(summary, str) or not summary.strip():
            raise SummarizationError(f"Groq returned an empty summary for {symbol}")

        logger.info(f"Groq summary generated for {symbol} using {self.model}")
        return summary.strip()


class GeminiSummarizer:
    """Gemini generateContent REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 15.0,
    ) -> None:
        self.client = client
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def summarize(self, text: str, symbol: str, company_name: str) -> str:
        payload = {
            "contents": [
                {"parts": [{"text": GEMINI_PROMPT.format(company=company_name, text=text)}]}
            ]
        }

        try:
            response = await self.client.post(
                f"{self.base_url}/models/{self.model}:generateContent",
                json=payload,
                params={"key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            parts = response.json()["candidates"][0]["content"]["parts"]
            summary = "".join(part.get("text", "") for part in parts)
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise SummarizationError(f"Gemini request failed for {symbol}: {e}") from e

        if not summary.strip():
            raise SummarizationError(f"Gemini returned an empty summary for {symbol}")

        logger.info(f"Gemini summary generated for {symbol}")
        return summary.strip()


def build_summarizer(config: AIConfig, client: httpx.AsyncClient) -> Summarizer | None:
    """Create the summarizer selected in configuration.

    Args:
        config: AI configuration section
        client: Shared HTTP client

    Returns:
        Summarizer instance, None when summarization is disabled

    Raises:
        ConfigurationError: If the selected provider has no API key
    """
    if config.provider == "groq":
        if not config.groq_api_key:
            raise ConfigurationError("ai.groq_api_key is required for the groq provider")
        return GroqSummarizer(
            client,
            api_key=config.groq_api_key,
            model=config.groq_model,
            base_url=config.groq_base_url,
            timeout=config.timeout,
        )

    if config.provider == "gemini":
        if not config.gemini_api_key:
            raise ConfigurationError("ai.gemini_api_key is required for the gemini provider")
        return GeminiSummarizer(
            client,
            api_key=config.gemini_api_key,
            model=config.gemini_model,
            base_url=config.gemini_base_url,
            timeout=config.timeout,
        )

    logger.info("AI summarization disabled, critical alerts will use fallback text")
    return None
