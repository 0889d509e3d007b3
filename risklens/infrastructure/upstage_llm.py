"""
Upstage LLM Gateway Implementation

LLMGateway backed by the Upstage Solar API, used by the risk advisor.
Retries with exponential backoff.
"""
import logging
from typing import Dict, Optional
from langchain_upstage import ChatUpstage
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)

from risklens.config import Settings
from risklens.ports.llm_gateway import LLMAPIError, LLMError, LLMGateway, LLMTimeoutError


logger = logging.getLogger(__name__)


class UpstageLLMGateway(LLMGateway):
    """
    LLM Gateway over the Upstage Solar API

    Features:
        - up to 3 attempts, backoff 1s -> 2s -> 4s
        - one client per requested temperature, created on first use

    Example:
        gateway = UpstageLLMGateway.from_settings(get_settings())
        response = gateway.invoke("Is this a risk or an issue? ...", temperature=0.2)
    """

    def __init__(self, api_key: str, model: str = "solar-pro", timeout: int = 30):
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._clients: Dict[Optional[float], ChatUpstage] = {}
        self._client(None)
        logger.info(f"UpstageLLMGateway initialized: model={model}, timeout={timeout}s")

    @classmethod
    def from_settings(cls, settings: Settings) -> "UpstageLLMGateway":
        return cls(api_key=settings.upstage_api_key, model=settings.llm_model, timeout=settings.llm_timeout)

    def _client(self, temperature: Optional[float]) -> ChatUpstage:
        if temperature not in self._clients:
            kwargs = {"api_key": self._api_key, "model": self._model, "timeout": self._timeout}
            if temperature is not None:
                kwargs["temperature"] = temperature
            try:
                self._clients[temperature] = ChatUpstage(**kwargs)
            except Exception as e:
                logger.error(f"Failed to initialize Upstage LLM: {e}")
                raise LLMAPIError(f"LLM initialization failed: {e}")
        return self._clients[temperature]

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type(LLMError),
        reraise=True
    )
    def invoke(self, prompt: str, temperature: Optional[float] = None) -> str:
        llm = self._client(temperature)
        try:
            logger.debug(f"Invoking LLM: prompt_length={len(prompt)}, temperature={temperature}")
            content = llm.invoke(prompt).content.strip()
        except TimeoutError as e:
            logger.error(f"LLM timeout: {e}")
            raise LLMTimeoutError(f"LLM call timed out after {self._timeout}s")
        except Exception as e:
            logger.error(f"LLM API error: {e}")
            raise LLMAPIError(f"LLM call failed: {e}")

        logger.info(f"LLM response received: length={len(content)}")
        return content

    def get_model_name(self) -> str:
        return self._model

    def __repr__(self) -> str:
        return f"<UpstageLLMGateway model={self._model}>"
