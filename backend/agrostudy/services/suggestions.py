"""Study assistant: answers free-text questions about the student's materials."""

import asyncio
import logging
from collections.abc import Iterable
from typing import Protocol

from anthropic import APIConnectionError, AsyncAnthropic, RateLimitError

from agrostudy.config import Settings, get_settings, sanitize_error
from agrostudy.schemas.events import EventRead
from agrostudy.schemas.notes import NoteRead
from agrostudy.schemas.pdfs import PdfDocumentRead

logger = logging.getLogger(__name__)

SIMULATED_REPLY = "Esta é uma resposta simulada. A integração com IA será implementada em breve!"

SYSTEM_PROMPT = (
    "Você é o AgroStudy IA, um assistente acadêmico para estudantes de ciências agrárias. "
    "Responda em português, de forma objetiva, citando prazos e materiais do aluno quando relevante."
)

MAX_CONTEXT_CHARS = 20000
NOTE_CONTEXT_MAX_CHARS = 2000

# Transient error types that warrant retrying
_RETRYABLE_ERRORS = (APIConnectionError, RateLimitError)


class SuggestionService(Protocol):
    async def ask(self, prompt: str, context: str = "") -> str: ...


def build_context(
    notes: Iterable[NoteRead] = (),
    events: Iterable[EventRead] = (),
    pdfs: Iterable[PdfDocumentRead] = (),
    max_chars: int = MAX_CONTEXT_CHARS,
) -> str:
    """
    Markdown summary of the student's loaded materials.

    Parts are added in order (agenda, library, notes) until the character
    budget is exhausted.
    """
    context_parts: list[str] = []
    total_chars = 0

    def _add_part(part: str) -> bool:
        nonlocal total_chars
        if total_chars + len(part) > max_chars:
            return False
        context_parts.append(part)
        total_chars += len(part)
        return True

    events = list(events)
    if events:
        lines = ["# Agenda"]
        for event in events:
            line = f"- **{event.title}** ({event.type}) em {event.starts_at:%d/%m/%Y %H:%M}"
            if event.subject:
                line += f" - {event.subject.name}"
            lines.append(line)
        _add_part("\n".join(lines) + "\n")

    pdfs = list(pdfs)
    if pdfs:
        lines = ["# Biblioteca"]
        lines.extend(f"- {pdf.title}, {pdf.author} ({pdf.category})" for pdf in pdfs)
        _add_part("\n".join(lines) + "\n")

    for note in notes:
        text = note.content_md[:NOTE_CONTEXT_MAX_CHARS]
        if len(note.content_md) > NOTE_CONTEXT_MAX_CHARS:
            text += "\n\n[... conteúdo truncado ...]"
        if not _add_part(f"# Anotação: {note.title}\n{text}\n"):
            context_parts.append("[... demais materiais omitidos ...]")
            break

    return "\n\n".join(context_parts)


class SimulatedSuggestionService:
    """Canned reply after a short delay, used until a model is configured."""

    def __init__(self, delay_seconds: float | None = None):
        self.delay_seconds = get_settings().simulated_reply_delay_seconds if delay_seconds is None else delay_seconds

    async def ask(self, prompt: str, context: str = "") -> str:
        logger.debug("Simulated reply for a %d-char prompt", len(prompt))
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)
        return SIMULATED_REPLY


class AnthropicSuggestionService:
    """Answers through the Anthropic Messages API. Failures become a reply, never an exception."""

    def __init__(self, settings: Settings | None = None, client: AsyncAnthropic | None = None):
        self.settings = settings or get_settings()
        self.client = client or AsyncAnthropic(api_key=self.settings.anthropic_api_key)

    def _system_prompt(self, context: str) -> str:
        if not context:
            return SYSTEM_PROMPT
        return f"""{SYSTEM_PROMPT}

---

## Materiais do aluno

{context}"""

    async def ask(self, prompt: str, context: str = "") -> str:
        max_attempts = 3
        last_error = None

        for attempt in range(max_attempts):
            try:
                message = await self.client.messages.create(
                    model=self.settings.llm_model,
                    max_tokens=self.settings.llm_max_tokens,
                    system=self._system_prompt(context),
                    messages=[{"role": "user", "content": prompt}],
                )
                return message.content[0].text

            except _RETRYABLE_ERRORS as e:
                last_error = e
                if attempt < max_attempts - 1:
                    delay = 1.0 * (2 ** attempt)
                    logger.warning(
                        "Anthropic API transient error (attempt %d/%d), retrying in %.1fs: %s",
                        attempt + 1, max_attempts, delay, str(e),
                    )
                    await asyncio.sleep(delay)
                else:
                    logger.exception("Assistant reply failed after %d attempts", max_attempts)

            except Exception as e:
                logger.exception("Error during assistant reply")
                last_error = e
                break

        safe_msg = sanitize_error(last_error, generic_message="Não foi possível gerar uma resposta agora.")
        return f"Erro: {safe_msg}"
