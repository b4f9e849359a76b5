"""Conversation manager: session creation, summaries and follow-up turns."""

import logging

from backend.smartcite.llm.client import CompletionClient
from backend.smartcite.models.session import StartSessionResult, Turn
from backend.smartcite.sessions.store import InMemorySessionStore, SessionNotFoundError
from backend.smartcite.tools.executor import (
    ToolContext,
    ToolExecutionError,
    ToolExecutor,
    ToolTimeoutError,
)
from backend.smartcite.utils.metrics import sessions_created_total

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You're a helpful assistant that reads PDFs and generates one paragraph summary. "
    "You don't use *."
)
DOCUMENT_PROMPT = "Here's the text from the PDF:\n\n{text}"
SUMMARY_INSTRUCTION = "Summarize this document."
FOLLOWUP_LENGTH_INSTRUCTION = "Please answer in 2-3 lines maximum."


class UpstreamGenerationError(Exception):
    """The completion service failed to produce a reply."""

    pass


def build_initial_turns(document_text: str) -> list[Turn]:
    """Build the opening dialogue for a freshly uploaded document."""
    return [
        Turn.system(SYSTEM_PROMPT),
        Turn.user(DOCUMENT_PROMPT.format(text=document_text)),
        Turn.user(SUMMARY_INSTRUCTION),
    ]


def build_followup_turns(message: str) -> list[Turn]:
    """Build the two user turns appended for every follow-up question."""
    return [Turn.user(message), Turn.user(FOLLOWUP_LENGTH_INSTRUCTION)]


class ConversationManager:
    """Creates sessions and drives follow-up dialogue against the store.

    The whole history is resent on every follow-up; nothing is summarized
    or windowed.
    """

    def __init__(
        self,
        store: InMemorySessionStore,
        completion_client: CompletionClient,
        executor: ToolExecutor | None = None,
        *,
        summary_temperature: float = 1.2,
        followup_temperature: float = 1.2,
        timeout_s: float = 60.0,
    ) -> None:
        self._store = store
        self._llm = completion_client
        self._executor = executor or ToolExecutor()
        self._summary_temperature = summary_temperature
        self._followup_temperature = followup_temperature
        self._timeout_s = timeout_s

    async def start_session(self, document_text: str) -> StartSessionResult:
        """Summarize a document and open a session for it.

        The session is only registered once the summary exists, so a failed
        completion leaves no trace in the store.

        Raises:
            ValueError: If the document text is empty
            UpstreamGenerationError: If the completion call fails
        """
        if not document_text.strip():
            raise ValueError("document text is empty")

        turns = build_initial_turns(document_text)
        summary = await self._complete(
            turns, self._summary_temperature, stage="summary", session_id=None
        )
        turns.append(Turn.assistant(summary))

        session = self._store.create(document_text, turns)
        sessions_created_total.inc()
        logger.info(
            f"Session created: session_id={session.session_id}, "
            f"document_chars={len(document_text)}"
        )

        return StartSessionResult(session_id=session.session_id, summary=summary)

    async def followup(self, session_id: str, message: str) -> str:
        """Answer a follow-up question within an existing session.

        Both user turns and the reply are appended together after the
        completion succeeds; on failure the history is left untouched.

        Raises:
            SessionNotFoundError: If the session id is unknown
            ValueError: If the message is blank
            UpstreamGenerationError: If the completion call fails
        """
        if not message.strip():
            raise ValueError("message is empty")

        async with self._store.session_lock(session_id) as session:
            new_turns = build_followup_turns(message)
            messages = [*session.history, *new_turns]

            reply = await self._complete(
                messages, self._followup_temperature, stage="followup", session_id=session_id
            )

            updated = self._store.append_turns(session_id, [*new_turns, Turn.assistant(reply)])
            if updated is None:
                raise SessionNotFoundError(session_id)

        logger.info(f"Follow-up answered: session_id={session_id}, turns={len(updated.history)}")
        return reply

    async def _complete(
        self,
        messages: list[Turn],
        temperature: float,
        *,
        stage: str,
        session_id: str | None,
    ) -> str:
        ctx = ToolContext(tool_name="completion", stage=stage, session_id=session_id)
        try:
            return await self._executor.execute(
                ctx,
                lambda: self._llm.complete(messages, temperature=temperature),
                timeout_s=self._timeout_s,
            )
        except (ToolTimeoutError, ToolExecutionError) as e:
            logger.error(f"Completion failed: stage={stage}, session_id={session_id}: {e}")
            raise UpstreamGenerationError(f"Completion service failed during {stage}") from e
