import os
from typing import Optional

import openai
from dotenv import load_dotenv
from loguru import logger
from openai import AsyncOpenAI

from crawler.interfaces import (
    QuotaExhaustedError, RateLimitExceededError, SummarizationError
)
from crawler.utils.rate_limiter import RetryPolicy, call_with_retry

# Load environment variables
load_dotenv()

DEFAULT_MODEL = "gpt-4o"
REQUEST_TIMEOUT_SECONDS = 240.0


def is_quota_exhausted(error: Exception) -> bool:
    """A 429 whose code or message points at billing quota rather than request rate."""
    if not isinstance(error, openai.RateLimitError):
        return False
    code = (getattr(error, 'code', None) or '').lower()
    message = (getattr(error, 'message', None) or str(error)).lower()
    return code == 'insufficient_quota' or 'quota' in message


def is_rate_limited(error: Exception) -> bool:
    return isinstance(error, openai.RateLimitError) and not is_quota_exhausted(error)


class SummaryModelClient:
    """Client for an OpenAI-compatible chat completions endpoint."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 base_url: Optional[str] = None,
                 timeout: float = REQUEST_TIMEOUT_SECONDS,
                 retry_policy: Optional[RetryPolicy] = None,
                 client: Optional[AsyncOpenAI] = None):
        """Initializes the model client.

        Args:
            api_key: Bearer token. If None, loads from OPENAI_API_KEY environment variable.
            model: Model identifier. If None, loads from SUMMARY_MODEL (default gpt-4o).
            base_url: Endpoint override. If None, loads from OPENAI_BASE_URL.
            timeout: Per-request timeout in seconds.
            retry_policy: Backoff applied to rate-limit responses.
            client: Pre-built AsyncOpenAI client (tests).
        """
        self.model = model or os.getenv("SUMMARY_MODEL", DEFAULT_MODEL)
        self.retry_policy = retry_policy or RetryPolicy()

        if client is not None:
            self.client = client
        else:
            api_key = api_key or os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise ValueError("OPENAI_API_KEY environment variable is not configured.")
            # SDK retries are disabled so the retry policy is the only one in charge
            self.client = AsyncOpenAI(
                api_key=api_key,
                base_url=base_url or os.getenv("OPENAI_BASE_URL") or None,
                timeout=timeout,
                max_retries=0,
            )
        logger.info(f"Summary model client initialized with model: {self.model}")

    async def complete(self, prompt: str, temperature: float = 0.4, max_tokens: int = 700) -> str:
        """
        Send a single-message prompt and return the generated text.

        Raises:
            QuotaExhaustedError: Billing quota is exhausted (fatal for the run)
            RateLimitExceededError: Still rate limited after every retry
            SummarizationError: Any other API failure
        """
        async def _attempt() -> str:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
            )
            if not response.choices:
                return ""
            return response.choices[0].message.content or ""

        try:
            return await call_with_retry(_attempt, self.retry_policy, is_rate_limited)
        except openai.RateLimitError as e:
            if is_quota_exhausted(e):
                logger.error("❌ Model quota exhausted, check billing for the API key")
                raise QuotaExhaustedError(f"Quota exhausted: {e}", source_name=self.model, cause=e)
            raise RateLimitExceededError(f"Rate limited after {self.retry_policy.max_attempts} attempts",
                                         source_name=self.model, cause=e)
        except openai.OpenAIError as e:
            raise SummarizationError(f"Model call failed: {e}", source_name=self.model, cause=e)
