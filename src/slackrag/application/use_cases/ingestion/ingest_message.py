"""Ingest message use case: thread + links + files -> stored knowledge."""

import logging

from slackrag.application.dto.ingestion_dto import IngestionOutcome
from slackrag.application.ports import ChatPlatform, FileExtractor, LinkExtractor
from slackrag.application.use_cases.knowledge.content_store import ContentStore
from slackrag.domain.entities import ChatFile, ChatMessage, ChatUser, InboundEvent, IngestDocument
from slackrag.domain.exceptions import (
    ChatPlatformError,
    EmbeddingServiceError,
    SourcePermissionError,
    StoreUnavailableError,
)
from slackrag.domain.value_objects import ExtractionResult, SegmentKind, extract_links, ts_to_datetime

logger = logging.getLogger(__name__)

DEFAULT_ACCESS_HELP = (
    ":lock: I don't have access to read {source}. Please share it with me "
    "(viewer access is enough), then post the link again so I can learn from it."
)


class IngestMessageUseCase:
    """Build a provenance-tagged document for a message and store it.

    Each link and file is extracted independently: a failure is recorded as a
    failed segment and never stops the rest of the document.
    """

    def __init__(
        self,
        chat: ChatPlatform,
        content_store: ContentStore,
        link_extractor: LinkExtractor,
        image_extractor: FileExtractor,
        pdf_extractor: FileExtractor,
        bot_user_id: str | None = None,
        access_help: str = DEFAULT_ACCESS_HELP,
    ) -> None:
        self._chat = chat
        self._content_store = content_store
        self._link_extractor = link_extractor
        self._image_extractor = image_extractor
        self._pdf_extractor = pdf_extractor
        self._bot_user_id = bot_user_id
        self._access_help = access_help

    def is_bot(self, user_id: str | None) -> bool:
        return bool(self._bot_user_id) and user_id == self._bot_user_id

    async def extract_link(
        self, url: str, channel_id: str | None = None, thread_ts: str | None = None
    ) -> ExtractionResult:
        """Extract one link. Access-gated sources get an in-thread access request."""
        try:
            extracted = await self._link_extractor.extract(url)
        except SourcePermissionError as e:
            logger.warning("No access to %s: %s", url, e)
            if channel_id:
                await self._request_access(channel_id, thread_ts, e.source or url)
            return ExtractionResult.failure(url, str(e))
        except Exception as e:
            logger.warning("Error processing link %s: %s", url, e)
            return ExtractionResult.failure(url, str(e))
        return ExtractionResult.success(url, extracted.content, extracted.summary)

    async def extract_file(self, file: ChatFile) -> tuple[SegmentKind, ExtractionResult] | None:
        """Extract an image or PDF attachment. Other file types are skipped."""
        if file.is_image:
            kind, extractor = SegmentKind.IMAGE_RESULT, self._image_extractor
        elif file.is_pdf:
            kind, extractor = SegmentKind.PDF_RESULT, self._pdf_extractor
        else:
            return None
        try:
            extracted = await extractor.extract(file.url)
        except Exception as e:
            logger.warning("Error processing file %s: %s", file.name, e)
            return kind, ExtractionResult.failure(file.name, str(e))
        return kind, ExtractionResult.success(file.name, extracted.content, extracted.summary)

    async def _request_access(self, channel_id: str, thread_ts: str | None, source: str) -> None:
        try:
            await self._chat.post_message(
                channel_id, self._access_help.format(source=source), thread_ts=thread_ts
            )
        except ChatPlatformError as e:
            logger.error("Could not post access request in %s: %s", channel_id, e)

    async def _source_messages(self, event: InboundEvent) -> list[ChatMessage]:
        """Thread replies (bots removed, oldest first) or the message alone."""
        own = event.as_message()
        if not event.thread_ts:
            return [own]
        try:
            replies = await self._chat.get_thread_replies(event.channel_id, event.thread_ts)
        except ChatPlatformError as e:
            logger.warning("Could not fetch thread %s, using message only: %s", event.thread_ts, e)
            return [own]
        messages = [m for m in replies if not m.is_bot and not self.is_bot(m.user)]
        messages.sort(key=lambda m: float(m.ts or 0))
        if event.ts and all(m.ts != event.ts for m in replies):
            messages.append(own)
        return messages

    async def assemble(self, event: InboundEvent) -> IngestDocument | None:
        """Build the document for an event, or None for the bot's own messages."""
        if self.is_bot(event.user_id):
            return None
        document = IngestDocument(channel_id=event.channel_id, thread_ts=event.document_ts or "")
        seen_links: set[str] = set()
        seen_files: set[str] = set()
        for message in await self._source_messages(event):
            document.add_text(message.text)
            for file in message.files:
                if file.url in seen_files:
                    continue
                seen_files.add(file.url)
                extracted = await self.extract_file(file)
                if extracted:
                    document.add_result(*extracted)
            links = extract_links(message.text)
            if message.ts == event.ts:
                links += event.links
            for url in links:
                if url in seen_links:
                    continue
                seen_links.add(url)
                result = await self.extract_link(url, event.channel_id, event.document_ts)
                document.add_result(SegmentKind.LINK_RESULT, result)
        return document

    async def sender(self, user_id: str | None) -> ChatUser:
        """Sender identity, falling back to the raw user id."""
        if not user_id:
            return ChatUser(id="", name="Unknown")
        try:
            return await self._chat.get_user(user_id)
        except ChatPlatformError as e:
            logger.warning("Could not look up user %s: %s", user_id, e)
            return ChatUser(id=user_id, name=user_id)

    async def execute(self, event: InboundEvent) -> IngestionOutcome:
        """Assemble and store. Storage failures drop the document, never raise."""
        document = await self.assemble(event)
        if document is None:
            return IngestionOutcome(document=None)
        text = document.render()
        if not text:
            return IngestionOutcome(document=document)
        sender = await self.sender(event.user_id)
        try:
            ids = await self._content_store.store_document(
                event.channel_id,
                document.thread_ts,
                text,
                sender_name=sender.name,
                sender_title=sender.title,
                origin_ts=ts_to_datetime(event.ts),
            )
        except (StoreUnavailableError, EmbeddingServiceError) as e:
            logger.error(
                "Dropping document %s/%s: %s", event.channel_id, document.thread_ts, e
            )
            return IngestionOutcome(document=document, stored=False)
        return IngestionOutcome(document=document, stored=bool(ids), chunk_ids=ids)
