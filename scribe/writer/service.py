"""
Writing Assistant Service

Turns an action tag plus the author's text into a single chat completion
on the hosted AI gateway, and maps gateway failures onto the writer's
error types.
"""

from typing import Optional, Dict, Any, List, AsyncGenerator

import openai
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from scribe.config import config
from scribe.utils.logging import writer_logger
from .errors import AIServiceError, PaymentRequiredError, RateLimitError
from .prompts import WRITING_ACTIONS, build_prompts


def translate_gateway_error(error: Exception) -> AIServiceError:
    """Map an OpenAI-client exception from the gateway to an AIServiceError."""
    if isinstance(error, openai.RateLimitError):
        return RateLimitError()
    if isinstance(error, openai.APIStatusError):
        if error.status_code == 402:
            return PaymentRequiredError()
        if error.status_code == 429:
            return RateLimitError()
        return AIServiceError(f"AI Gateway error: {error.status_code}")
    if isinstance(error, openai.APIConnectionError):
        return AIServiceError("AI Gateway is unreachable")
    return AIServiceError(str(error) or "An error occurred")


class WriterService:
    """
    Service for AI writing assistance.

    One request, one completion: no retries and no fallback content.
    """

    def __init__(self, llm: Optional[Any] = None):
        """
        Args:
            llm: Chat model to use. Built from configuration on first use
                 when not given.
        """
        self._llm = llm

    @property
    def llm(self):
        if self._llm is None:
            if not config.AI_GATEWAY_API_KEY:
                raise AIServiceError("AI gateway key is not configured")
            self._llm = ChatOpenAI(
                model=config.AI_MODEL,
                base_url=config.AI_GATEWAY_URL,
                api_key=config.AI_GATEWAY_API_KEY,
                temperature=config.AI_TEMPERATURE,
                max_retries=0,
            )
        return self._llm

    # =========================================================================
    # Actions
    # =========================================================================

    async def run(
        self,
        action: str,
        text: Optional[str] = None,
        context: Optional[str] = None,
        prompt: Optional[str] = None,
    ) -> str:
        """
        Run a writing action.

        Args:
            action: Action tag (autocomplete, rewrite-show, editor-plot, ...)
            text: The author's text, HTML already stripped
            context: Trailing context for autocomplete and character generation
            prompt: Free-form prompt for generate-scene and chat

        Returns:
            The generated text

        Raises:
            InvalidActionError: Unknown action tag
            RateLimitError: Gateway answered 429
            PaymentRequiredError: Gateway answered 402
            AIServiceError: Any other failure
        """
        system_prompt, user_prompt = build_prompts(action, text, context, prompt)

        writer_logger.info(
            "AI writer request",
            action=action,
            text_length=len(text or ""),
            context_length=len(context or ""),
        )

        messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
        result = await self._complete(messages, action=action)

        writer_logger.info("AI writer success", action=action, result_length=len(result))
        return result

    async def chat(self, message: str, history: Optional[List[Dict[str, str]]] = None) -> str:
        """Continue a conversation with the writing coach."""
        messages = self._chat_messages(message, history)
        return await self._complete(messages, action="chat")

    async def chat_stream(
        self, message: str, history: Optional[List[Dict[str, str]]] = None
    ) -> AsyncGenerator[str, None]:
        """
        Stream a coaching reply.

        Yields:
            Chunks of the response text
        """
        messages = self._chat_messages(message, history)
        try:
            async for chunk in self.llm.astream(messages):
                if chunk.content:
                    yield chunk.content
        except openai.OpenAIError as e:
            writer_logger.error("AI chat stream failed", error=str(e))
            raise translate_gateway_error(e) from e

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _chat_messages(
        message: str, history: Optional[List[Dict[str, str]]]
    ) -> List[BaseMessage]:
        messages: List[BaseMessage] = [SystemMessage(content=WRITING_ACTIONS["chat"]["system"])]
        for msg in history or []:
            if msg.get("role") == "user":
                messages.append(HumanMessage(content=msg["content"]))
            else:
                messages.append(AIMessage(content=msg["content"]))
        messages.append(HumanMessage(content=message or "Hello!"))
        return messages

    async def _complete(self, messages: List[BaseMessage], action: str) -> str:
        try:
            response = await self.llm.ainvoke(messages)
        except openai.OpenAIError as e:
            error = translate_gateway_error(e)
            writer_logger.error(
                "AI gateway error", action=action, status=error.status_code, error=str(e)
            )
            raise error from e
        return response.content
