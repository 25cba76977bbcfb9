from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging

from openai import AsyncOpenAI
from tenacity import retry, stop_after_attempt, wait_exponential_jitter, retry_if_exception_type
from aiolimiter import AsyncLimiter

log = logging.getLogger("lexi.llm")

class AsyncLLMClient:
    def __init__(
        self,
        client: AsyncOpenAI,
        model: str,
        max_retries: int,
        timeout_s: float,
        limiter: Optional[AsyncLimiter] = None,
    ):
        self._client = client
        self._model = model
        self._max_retries = max_retries
        self._timeout_s = timeout_s
        self._limiter = limiter

    def _retry(self):
        return retry(
            reraise=True,
            stop=stop_after_attempt(self._max_retries if self._max_retries > 0 else 1),
            wait=wait_exponential_jitter(initial=0.8, max=30),
            retry=retry_if_exception_type(Exception),
        )

    async def complete(self, messages: List[Dict[str, Any]]) -> str:
        @self._retry()
        async def _do():
            if self._limiter:
                await self._limiter.acquire()
            resp = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=0.0,
                timeout=self._timeout_s,
            )
            return resp.choices[0].message.content or ""

        text = await _do()
        log.debug("LLM completion received", extra={"component": "llm", "event": "completion"})
        return text
