"""
Thin async wrapper over the google-generativeai SDK.
"""

import asyncio
from typing import Optional

import google.generativeai as genai

from codeassess.config import GEMINI_MODEL


class UserMessage:
    """A single text prompt."""

    def __init__(self, text: str = ""):
        self.text = text

    def to_genai_parts(self) -> list:
        return [self.text] if self.text else []


class LlmChat:
    """
    Chat session with a chaining setup API:
        chat = LlmChat(system_message=...)
            .with_model("gemini", "gemini-2.5-flash")
            .with_params(temperature=0, json_output=True)

    send_message() is async and returns a plain string.
    """

    def __init__(self, session_id: str = "", system_message: str = ""):
        self._session_id = session_id
        self._system_message = system_message
        self._model_name = GEMINI_MODEL
        self._temperature: Optional[float] = None
        self._json_output = False
        self._chat = None  # lazily created

    def with_model(self, provider: str, model_name: str) -> "LlmChat":
        """Set the model. Provider is ignored (always Gemini)."""
        self._model_name = model_name
        return self

    def with_params(self, temperature: float = None, json_output: bool = None, **kwargs) -> "LlmChat":
        """Set generation parameters."""
        if temperature is not None:
            self._temperature = temperature
        if json_output is not None:
            self._json_output = json_output
        return self

    def _ensure_chat(self):
        if self._chat is None:
            gen_config = {}
            if self._temperature is not None:
                gen_config["temperature"] = self._temperature
            if self._json_output:
                gen_config["response_mime_type"] = "application/json"

            model = genai.GenerativeModel(
                model_name=self._model_name,
                system_instruction=self._system_message if self._system_message else None,
                generation_config=gen_config if gen_config else None,
            )
            self._chat = model.start_chat(history=[])

    async def send_message(self, message: UserMessage) -> str:
        """
        Send a message and return the response text.

        The SDK call is synchronous, so it runs in the default executor.
        """
        self._ensure_chat()
        parts = message.to_genai_parts()

        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None, lambda: self._chat.send_message(parts)
        )

        return response.text
