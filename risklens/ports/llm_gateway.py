"""
LLM port used by the risk advisor.

Adapters implement ``invoke``; ``invoke_json`` is shared and turns a reply
into the JSON object the advisor prompt asks for.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from risklens.utils.json_utils import safe_json_parse


class LLMError(Exception):
    """Base class for failures behind the LLM port"""
    pass


class LLMAPIError(LLMError):
    """The provider rejected the call or could not be reached"""
    pass


class LLMTimeoutError(LLMError):
    """No reply within the configured timeout"""
    pass


class LLMGateway(ABC):

    @abstractmethod
    def invoke(self, prompt: str, temperature: Optional[float] = None) -> str:
        """
        Returns the stripped reply text for one prompt.

        Raises:
            LLMAPIError, LLMTimeoutError
        """

    @abstractmethod
    def get_model_name(self) -> str:
        pass

    def invoke_json(self, prompt: str, temperature: Optional[float] = None) -> Dict[str, Any]:
        """
        ``invoke`` followed by lenient JSON extraction.

        Raises:
            LLMError: the call failed
            json.JSONDecodeError: the reply holds no JSON object
            TypeError: the reply is JSON but not an object
        """
        data = safe_json_parse(self.invoke(prompt, temperature=temperature))
        if not isinstance(data, dict):
            raise TypeError(f"Expected a JSON object from {self.get_model_name()}, got {type(data).__name__}")
        return data
