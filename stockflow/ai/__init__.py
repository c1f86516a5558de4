from stockflow.ai.summarizer import (
    GeminiSummarizer,
    GroqSummarizer,
    Summarizer,
    build_summarizer,
)

__all__ = [
    "GeminiSummarizer",
    "GroqSummarizer",
    "Summarizer",
    "build_summarizer",
]
