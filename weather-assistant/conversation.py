import logging

from config import AI_PROXY_URL
from errors import AssistantUnavailableError, InputValidationError, WeatherAppError
from models import ChatMessage, ForecastEntry, Units, WeatherSnapshot
from prompts import (
    CHAT_FAILURE_MESSAGE,
    EMPTY_QUESTION_PROMPT,
    INSIGHT_FAILURE_MESSAGE,
    NO_WEATHER_PROMPT,
    SYSTEM_PROMPT,
    chat_turn,
    insight_request,
)
from proxy_client import complete_chat
from weather_context import build_context

# 8 user/assistant pairs
MAX_HISTORY = 16

logger = logging.getLogger(__name__)


class ConversationManager:
    """Chat history and prompt assembly for the weather assistant.

    History holds only raw questions and replies. Every outgoing request
    re-sends a fresh context block with the newest question so each proxy
    call is self-contained. Concurrent sends are not serialised here; the
    caller keeps input disabled until a send resolves.
    """

    def __init__(self, proxy_url: str = AI_PROXY_URL, max_history: int = MAX_HISTORY):
        self.proxy_url = proxy_url
        self.max_history = max_history
        self._history: list[ChatMessage] = []
        self._snapshot: WeatherSnapshot | None = None
        self._digests: list[ForecastEntry] = []
        self._units = Units.metric

    @property
    def history(self) -> list[ChatMessage]:
        return list(self._history)

    def load(self, snapshot: WeatherSnapshot, digests: list[ForecastEntry], units: Units) -> None:
        self._snapshot = snapshot
        self._digests = list(digests)
        self._units = units
        self.reset()

    def reset(self) -> None:
        self._history = []

    def _context(self) -> str:
        return build_context(self._snapshot, self._digests, self._units)

    def _build_outgoing(self, question: str) -> list[dict]:
        latest = {"role": "user", "content": chat_turn(self._context(), question)}
        return [msg.model_dump() for msg in self._history] + [latest]

    async def send_message(self, user_text: str) -> str:
        if not user_text or not user_text.strip():
            raise InputValidationError(EMPTY_QUESTION_PROMPT)
        if self._snapshot is None:
            raise InputValidationError(NO_WEATHER_PROMPT)

        messages = self._build_outgoing(user_text)
        logger.info(
            "Chat send: question=%r, history_turns=%d",
            user_text[:80],
            len(self._history),
        )

        try:
            reply = await complete_chat(messages, SYSTEM_PROMPT, self.proxy_url)
        except WeatherAppError as exc:
            logger.error("AI chat error: %s", exc)
            raise AssistantUnavailableError(CHAT_FAILURE_MESSAGE) from exc

        self._history.append(ChatMessage(role="user", content=user_text))
        self._history.append(ChatMessage(role="assistant", content=reply))
        if len(self._history) > self.max_history:
            self._history = self._history[-self.max_history:]

        logger.info("Chat reply: reply=%r, history_turns=%d", reply[:120], len(self._history))
        return reply

    async def generate_auto_insight(self) -> str:
        if self._snapshot is None:
            raise InputValidationError(NO_WEATHER_PROMPT)

        messages = [{"role": "user", "content": insight_request(self._context())}]
        try:
            return await complete_chat(messages, SYSTEM_PROMPT, self.proxy_url)
        except WeatherAppError as exc:
            logger.warning("AI insight error: %s", exc)
            raise AssistantUnavailableError(INSIGHT_FAILURE_MESSAGE) from exc
