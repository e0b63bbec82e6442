"""Answer mention use case - retrieve knowledge and reply to a question."""

import asyncio
import logging

from slackrag.application.ports import ChatPlatform, Generator
from slackrag.application.use_cases.ingestion.ingest_message import IngestMessageUseCase
from slackrag.application.use_cases.search.relevant_context import GetRelevantContextUseCase
from slackrag.domain.entities import ChatMessage, InboundEvent
from slackrag.domain.exceptions import ChatPlatformError, GenerationError
from slackrag.domain.value_objects import (
    NOTION_LINK_RE,
    SPREADSHEET_LINK_RE,
    days_since,
    extract_links,
    ts_to_datetime,
    unique,
)

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = "Sorry, I encountered an error processing your request."

SYSTEM_PROMPT = """You are a helpful assistant that answers questions using the context below. \
You may also draw on other sources, including the internet. If you use information from a link, \
include the link in your response.

Important: pay special attention to the recency of the messages. Information from more recent \
messages should be given higher priority, and you should explicitly mention if you are using \
older information that might be outdated. If you use information from a message link, include \
that link in your response.

About the company:
{company}

{channel}

Relevant context from the knowledge base (sorted by recency):
{context}

Current conversation thread:
{thread}
{links}"""


class AnswerMentionUseCase:
    """React, gather context, ask the generator, post the answer in the thread."""

    def __init__(
        self,
        chat: ChatPlatform,
        ingest: IngestMessageUseCase,
        relevant_context: GetRelevantContextUseCase,
        generator: Generator,
        company_context: str = "",
        context_max_tokens: int = 4000,
    ) -> None:
        self._chat = chat
        self._ingest = ingest
        self._relevant_context = relevant_context
        self._generator = generator
        self._company_context = company_context
        self._context_max_tokens = context_max_tokens

    async def _react(self, event: InboundEvent, name: str) -> None:
        try:
            await self._chat.add_reaction(event.channel_id, event.ts or "", name)
        except ChatPlatformError as e:
            logger.warning("Could not add :%s: reaction: %s", name, e)

    async def _describe(self, message: ChatMessage) -> str:
        try:
            user = await self._chat.get_user(message.user or "")
        except ChatPlatformError as e:
            logger.warning("Error getting user info for %s: %s", message.user, e)
            return f"Message from {message.user}: {message.text}\n"
        sent = ts_to_datetime(message.ts)
        days = days_since(sent) if sent else 0
        return f"Message from {user.name} ({user.title}) {days} days ago: {message.text}\n"

    async def channel_description(self, channel_id: str) -> str:
        try:
            channel = await self._chat.get_channel(channel_id)
        except ChatPlatformError as e:
            logger.warning("Could not fetch channel info for %s: %s", channel_id, e)
            return ""
        return f"Current channel: #{channel.name}\nPurpose: {channel.purpose}\nTopic: {channel.topic}"

    async def thread_transcript(self, event: InboundEvent) -> str:
        """Current thread rendered as provenance lines."""
        root = event.document_ts
        if not root:
            return ""
        try:
            replies = await self._chat.get_thread_replies(event.channel_id, root)
        except ChatPlatformError as e:
            logger.warning("Could not fetch thread %s: %s", root, e)
            return event.text
        lines = await asyncio.gather(*(self._describe(m) for m in replies))
        return "\n\n".join(lines)

    async def linked_documents(self, text: str) -> str:
        """Full content of Notion pages and Google Spreadsheets referenced in text."""
        sections = []
        for label, pattern in (
            ("Notion pages", NOTION_LINK_RE),
            ("Google Spreadsheets", SPREADSHEET_LINK_RE),
        ):
            links = unique(pattern.findall(text))
            if not links:
                continue
            results = await asyncio.gather(*(self._ingest.extract_link(link) for link in links))
            contents = [f"Content from {link}:\n{r.content}" for link, r in zip(links, results) if r.ok]
            if contents:
                sections.append(f"\n\nAdditional context from {label}:\n" + "\n\n".join(contents))
        return "".join(sections)

    @staticmethod
    def link_summary(event: InboundEvent, document_results: list) -> str:
        """Summary of links in the mention itself, with placeholders for failures."""
        urls = extract_links(event.text)
        if not urls:
            return ""
        by_source = {r.source: r for r in document_results}
        text = "Here's a summary of the links in your message:\n\n"
        for url in urls:
            result = by_source.get(url)
            if result is not None and result.ok:
                text += f"{url} : \n{result.summary}\n\n"
            else:
                text += f"*{url}*\nSorry, I couldn't process this link.\n\n"
        return text

    async def execute(self, event: InboundEvent) -> str:
        """Answer the mention and return the posted reply."""
        await self._react(event, "eyes")
        document = await self._ingest.assemble(event)
        question = (document.render() if document else "") or event.text
        links = self.link_summary(event, document.link_results if document else [])

        context = await self._relevant_context.execute(question, self._context_max_tokens)
        thread = await self.thread_transcript(event)
        context += await self.linked_documents(context + "\n" + thread)

        system = SYSTEM_PROMPT.format(
            company=self._company_context,
            channel=await self.channel_description(event.channel_id),
            context=context,
            thread=thread,
            links=f"\nLinks in the current message:\n{links}" if links else "",
        )
        try:
            reply = await self._generator.answer(system, question)
        except GenerationError as e:
            logger.error("Answer generation failed: %s", e)
            reply = APOLOGY_MESSAGE
        await self._chat.post_message(event.channel_id, reply, thread_ts=event.document_ts)
        return reply
