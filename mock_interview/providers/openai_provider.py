"""OpenAI chat completions provider used by the scoring proxy."""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import BaseModel, Field, ValidationError

from ..utils.exceptions import AuthenticationError, LLMProviderError
from ..utils.logging import get_logger

SCORE_PROMPT_TEMPLATE = (
    "You are a helpful evaluator. Rate the candidate answer on scale 0-10 and give a "
    "one-sentence feedback. Return JSON exactly like: {{\"score\": <int>, \"feedback\":\"...\"}}.\n"
    "Question: {question}\n"
    "Answer: {answer}"
)

QUESTION_PROMPT_TEMPLATE = (
    "Generate a single {difficulty} interview question about {topic}. "
    "Respond with exact JSON: {{\"question\":\"...\"}}"
)


def build_score_prompt(question: Any, answer: Any) -> str:
    """Build the evaluation prompt for one question and answer."""
    return SCORE_PROMPT_TEMPLATE.format(question=question, answer=answer)


def build_question_prompt(topic: Any = "general", difficulty: Any = "medium") -> str:
    """Build the prompt asking for a single interview question."""
    return QUESTION_PROMPT_TEMPLATE.format(topic=topic, difficulty=difficulty)


class ChatCompletionRequest(BaseModel):
    """Chat completions request model."""
    model: str = Field(..., description="Model to use for generation")
    messages: List[Dict[str, str]] = Field(..., description="List of messages")
    max_tokens: int = Field(default=200, description="Maximum tokens to generate")
    temperature: Optional[float] = Field(default=None, description="Sampling temperature")


class ChatCompletionResponse(BaseModel):
    """Chat completions response model.

    Only ``choices`` is required; the proxy reads the first message.
    """
    id: str = "unknown"
    model: str = ""
    choices: List[Dict[str, Any]] = Field(default_factory=list)
    usage: Dict[str, Any] = Field(default_factory=dict)

    def first_content(self) -> str:
        """Content of the first choice's message, or an empty string."""
        if not self.choices:
            return ""
        message = self.choices[0].get("message") or {}
        return message.get("content") or ""


class OpenAIProvider:
    """Async client for the OpenAI chat completions endpoint."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.provider_name = config.get("name", "openai")
        self.api_key = config.get("api_key")
        self.base_url = config.get("base_url", "https://api.openai.com/v1").rstrip("/")
        self.model = config.get("model", "gpt-4o-mini")
        self.timeout = config.get("timeout", 30)
        self.score_max_tokens = config.get("score_max_tokens", 200)
        self.generate_max_tokens = config.get("generate_max_tokens", 150)
        self.logger = get_logger(f"llm.provider.{self.provider_name}")

    @property
    def is_configured(self) -> bool:
        """Whether an API key is available."""
        return bool(self.api_key)

    async def complete(self, prompt: str, max_tokens: Optional[int] = None) -> str:
        """Send a single user message and return the reply text.

        Args:
            prompt: User message content
            max_tokens: Completion token limit

        Returns:
            The first choice's message content ("" when absent)

        Raises:
            AuthenticationError: Missing or rejected API key
            LLMProviderError: Network failure, timeout or an unreadable body
        """
        if not self.api_key:
            raise AuthenticationError("OPENAI_API_KEY not set", provider_name=self.provider_name)

        request = ChatCompletionRequest(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens or self.score_max_tokens,
        )
        response = await self._make_request(request)
        return response.first_content()

    async def _make_request(self, request: ChatCompletionRequest) -> ChatCompletionResponse:
        """Make a request to the chat completions API."""
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = request.model_dump(exclude_none=True)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, json=payload, headers=headers) as response:
                    if response.status == 401:
                        raise AuthenticationError("Invalid OpenAI API key", provider_name=self.provider_name)
                    if response.status != 200:
                        # Error bodies carry no choices and read as an empty reply
                        body = await response.text()
                        self.logger.warning(f"OpenAI API returned status {response.status}: {body[:200]}")
                    response_data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self.logger.error(f"OpenAI request failed: {str(e)}")
            raise LLMProviderError(f"OpenAI request failed: {str(e)}", provider_name=self.provider_name) from e

        try:
            return ChatCompletionResponse.model_validate(response_data)
        except ValidationError as e:
            self.logger.warning(f"Unexpected OpenAI response shape: {e}")
            raise LLMProviderError("Malformed OpenAI response", provider_name=self.provider_name) from e
