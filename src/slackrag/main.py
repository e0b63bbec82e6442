"""Application entry point and composition root."""

import httpx
from openai import AsyncOpenAI
from slack_sdk.signature import SignatureVerifier
from slack_sdk.web.async_client import AsyncWebClient

from slackrag import __version__
from slackrag.application.dto.chunking_config import ChunkingConfig
from slackrag.application.use_cases.answer.answer_mention import AnswerMentionUseCase
from slackrag.application.use_cases.events.dispatch_event import EventDispatcher
from slackrag.application.use_cases.ingestion.backfill_channel import BackfillChannelUseCase
from slackrag.application.use_cases.ingestion.ingest_message import (
    DEFAULT_ACCESS_HELP,
    IngestMessageUseCase,
)
from slackrag.application.use_cases.knowledge.content_store import ContentStore
from slackrag.application.use_cases.retention.forget_channel import ForgetChannelUseCase
from slackrag.application.use_cases.search.relevant_context import GetRelevantContextUseCase
from slackrag.config import Settings, get_settings
from slackrag.infrastructure.chunking.sentence_chunker import SentenceChunker
from slackrag.infrastructure.chunking.token_estimators import CharacterTokenEstimator
from slackrag.infrastructure.embedding.openai_provider import OpenAIEmbeddingProvider
from slackrag.infrastructure.extraction.google_drive import GoogleDriveExtractor
from slackrag.infrastructure.extraction.image import ImageDescriber
from slackrag.infrastructure.extraction.notion import NotionPageExtractor
from slackrag.infrastructure.extraction.pdf import PdfExtractor
from slackrag.infrastructure.extraction.router import LinkContentRouter
from slackrag.infrastructure.extraction.web_page import WebPageExtractor
from slackrag.infrastructure.generation.openai_generator import OpenAIGenerator
from slackrag.infrastructure.persistence.postgres.connection import create_pool
from slackrag.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from slackrag.infrastructure.slack.client import SlackChatPlatform
from slackrag.interfaces.api.app import create_app
from slackrag.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from slackrag.interfaces.api.resources.health import HealthResource
from slackrag.interfaces.api.resources.slack_events import SlackEventsResource
from slackrag.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def access_help_message(settings: Settings) -> str:
    """Access request text, naming the Drive share address when one is configured."""
    if not settings.drive_share_email:
        return DEFAULT_ACCESS_HELP
    return DEFAULT_ACCESS_HELP + (
        f" For Google Drive files, share them with `{settings.drive_share_email}`."
    )


def create_slackrag_app(settings: Settings | None = None):
    """Composition root - build Falcon app with all dependencies."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting SlackRAG v%s", __version__)

    pool = create_pool(settings.database_url)
    uow_factory = create_uow_factory(pool)
    http = httpx.AsyncClient(follow_redirects=True)
    openai_client = AsyncOpenAI(
        base_url=settings.openai_api_url,
        api_key=settings.openai_api_key,
        timeout=settings.embedding_timeout_seconds,
    )

    estimator = CharacterTokenEstimator()
    embedding_provider = OpenAIEmbeddingProvider(
        base_url=settings.openai_api_url,
        api_key=settings.openai_api_key,
        model=settings.embedding_model,
        dimensions=settings.embedding_dimensions,
        max_input_tokens=settings.embedding_max_tokens,
        timeout=settings.embedding_timeout_seconds,
        estimator=estimator,
        client=openai_client,
    )
    generator = OpenAIGenerator(
        base_url=settings.openai_api_url,
        api_key=settings.openai_api_key,
        model=settings.generation_model,
        max_tokens=settings.generation_max_tokens,
        timeout=settings.generation_timeout_seconds,
        client=openai_client,
    )
    content_store = ContentStore(
        unit_of_work_factory=uow_factory,
        chunker=SentenceChunker(estimator),
        embedding_provider=embedding_provider,
        chunking_config=ChunkingConfig(max_tokens_per_chunk=settings.chunk_max_tokens),
    )

    timeout = settings.extractor_timeout_seconds
    link_router = LinkContentRouter(
        web=WebPageExtractor(http, generator, timeout=timeout),
        notion=NotionPageExtractor(http, generator, token=settings.notion_token or "", timeout=timeout),
        drive=GoogleDriveExtractor(
            generator, credentials_file=settings.google_service_account_file, timeout=timeout
        ),
    )
    chat = SlackChatPlatform(AsyncWebClient(token=settings.slack_bot_token))

    ingest = IngestMessageUseCase(
        chat=chat,
        content_store=content_store,
        link_extractor=link_router,
        image_extractor=ImageDescriber(
            http,
            openai_client,
            generator,
            model=settings.vision_model,
            bot_token=settings.slack_bot_token,
            timeout=timeout,
        ),
        pdf_extractor=PdfExtractor(http, generator, bot_token=settings.slack_bot_token, timeout=timeout),
        bot_user_id=settings.slack_bot_user_id,
        access_help=access_help_message(settings),
    )
    relevant_context = GetRelevantContextUseCase(
        content_store=content_store,
        estimator=estimator,
        candidate_pool=settings.context_candidate_pool,
        min_similarity=settings.context_min_similarity,
        base_uri=settings.slack_base_uri,
    )
    dispatcher = EventDispatcher(
        chat=chat,
        ingest=ingest,
        answer=AnswerMentionUseCase(
            chat=chat,
            ingest=ingest,
            relevant_context=relevant_context,
            generator=generator,
            company_context=settings.company_context,
            context_max_tokens=settings.context_max_tokens,
        ),
        backfill=BackfillChannelUseCase(
            chat=chat,
            ingest=ingest,
            page_size=settings.backfill_page_size,
            max_messages=settings.backfill_max_messages,
            cooldown_seconds=settings.backfill_cooldown_seconds,
        ),
        forget=ForgetChannelUseCase(content_store),
        bot_user_id=settings.slack_bot_user_id,
    )

    if not settings.slack_signing_secret:
        logger.warning("SLACK_SIGNING_SECRET is not set; request signatures are not verified")
    verifier = SignatureVerifier(settings.slack_signing_secret) if settings.slack_signing_secret else None

    return create_app(
        slack_events_resource=SlackEventsResource(dispatcher, verifier),
        health_resource=HealthResource(pool),
        middleware=[PoolLifespanMiddleware(pool, http)],
    )


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    app = create_slackrag_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run_server()
