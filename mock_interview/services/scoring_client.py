"""HTTP client for the scoring proxy."""

import asyncio
from typing import Any, Dict

import aiohttp
from pydantic import ValidationError

from ..models.interview import ScoreResult
from ..proxy.reply_parser import QuestionReply
from ..utils.exceptions import ScoringError
from ..utils.logging import get_logger


class ScoringClient:
    """Scores answers and generates questions through the proxy.

    Every failure mode (network error, non-200 status, malformed body,
    timeout) surfaces as ``ScoringError``.
    """

    def __init__(self, proxy_url: str = "http://127.0.0.1:8000", timeout_seconds: float = 10.0):
        self.proxy_url = proxy_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.logger = get_logger("scoring_client")

    @classmethod
    def from_config(cls, scoring_config) -> "ScoringClient":
        """Build a client from a ``ScoringConfig`` section."""
        return cls(proxy_url=scoring_config.proxy_url, timeout_seconds=scoring_config.timeout_seconds)

    async def score_answer(self, question_text: str, answer_text: str) -> ScoreResult:
        """Score one answer.

        Args:
            question_text: The question prompt
            answer_text: The candidate's answer, possibly empty

        Returns:
            ScoreResult with the score and feedback

        Raises:
            ScoringError: If the proxy cannot produce a score
        """
        data = await self._post("/api/score", {"question": question_text, "answer": answer_text})
        try:
            result = ScoreResult.model_validate(data)
        except ValidationError as e:
            raise ScoringError(f"Malformed score response: {e.error_count()} errors",
                               url=self._url("/api/score")) from e

        self.logger.info(f"Received score {result.score}")
        return result

    async def generate_question(self, topic: str = "general", difficulty: str = "medium") -> str:
        """Ask the proxy for a single generated question."""
        data = await self._post("/api/generate", {"topic": topic, "difficulty": difficulty})
        try:
            return QuestionReply.model_validate(data).question
        except ValidationError as e:
            raise ScoringError(f"Malformed question response: {e.error_count()} errors",
                               url=self._url("/api/generate")) from e

    def _url(self, path: str) -> str:
        return f"{self.proxy_url}{path}"

    async def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        url = self._url(path)
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, json=payload) as response:
                    if response.status != 200:
                        body = await response.text()
                        raise ScoringError(
                            f"Proxy returned status {response.status}: {body[:200]}",
                            url=url,
                            status_code=response.status,
                        )
                    return await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            self.logger.warning(f"Request to {url} timed out after {self.timeout_seconds}s")
            raise ScoringError(f"Request timed out after {self.timeout_seconds}s", url=url) from e
        except aiohttp.ClientError as e:
            self.logger.warning(f"Request to {url} failed: {str(e)}")
            raise ScoringError(f"Request failed: {str(e)}", url=url) from e
        except ValueError as e:
            raise ScoringError(f"Invalid JSON from proxy: {str(e)}", url=url) from e
