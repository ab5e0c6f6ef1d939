"""Service wiring and FastAPI dependency providers."""

from dataclasses import dataclass

import assemblyai as aai
import redis
from fastapi import Request
from google import genai
from linebot.v3.messaging import ApiClient, Configuration, MessagingApi
from minio import Minio

from yorisoi.config import AppConfig
from yorisoi.domain.audio_normalizer import AudioNormalizer
from yorisoi.domain.chunk_summarizer import ChunkSummarizer
from yorisoi.domain.delivery_gate import DeliveryGate
from yorisoi.domain.job_manager import TranscriptionJobManager
from yorisoi.domain.reducer import SummaryReducer
from yorisoi.handlers.finalize_handler import FinalizeHandler
from yorisoi.handlers.job_poll_handler import JobPollHandler
from yorisoi.infrastructure.assemblyai_transcriber import AssemblyAITranscriber
from yorisoi.infrastructure.gemini_llm import GeminiLLMService
from yorisoi.infrastructure.interfaces import (
    LLMService,
    MarkerStore,
    MessagingService,
    ObjectStorage,
    TranscriptionService,
)
from yorisoi.infrastructure.line_messaging import LineMessagingService
from yorisoi.infrastructure.minio_storage import MinioObjectStorage
from yorisoi.infrastructure.redis_marker_store import RedisMarkerStore
from yorisoi.logging import setup_logging
from yorisoi.repositories.job_repository import ObjectStoreJobRepository

logger = setup_logging()


@dataclass(frozen=True)
class Services:
    """Every handle the HTTP layer needs, built once per application."""

    config: AppConfig
    storage: ObjectStorage
    messenger: MessagingService
    finalize_handler: FinalizeHandler
    poll_handler: JobPollHandler


def create_services(
    config: AppConfig,
    storage: ObjectStorage,
    transcriber: TranscriptionService,
    llm: LLMService,
    messenger: MessagingService,
    marker_store: MarkerStore,
) -> Services:
    """Wires the domain and handlers around the given backends."""
    job_manager = TranscriptionJobManager(
        transcriber, ObjectStoreJobRepository(storage), storage
    )
    finalize_handler = FinalizeHandler(
        storage,
        AudioNormalizer(config.pipeline.ffmpeg_path),
        job_manager,
        config.pipeline,
        config.assemblyai.language_code,
    )
    poll_handler = JobPollHandler(
        storage,
        job_manager,
        ChunkSummarizer(llm, config.gemini.max_parallel),
        SummaryReducer(llm),
        DeliveryGate(marker_store),
        messenger,
        config.pipeline,
    )
    return Services(
        config=config,
        storage=storage,
        messenger=messenger,
        finalize_handler=finalize_handler,
        poll_handler=poll_handler,
    )


def build_services(config: AppConfig) -> Services:
    """Creates the SDK clients from configuration and wires the services."""
    minio_client = Minio(
        endpoint=config.minio.endpoint,
        access_key=config.minio.user,
        secret_key=config.minio.password,
        secure=config.minio.secure,
    )
    storage = MinioObjectStorage(minio_client, config.minio.bucket_name)
    storage.ensure_bucket_exists()

    aai.settings.api_key = config.assemblyai.api_key
    transcriber = AssemblyAITranscriber(
        aai.Transcriber(), punctuate=config.assemblyai.punctuate
    )

    llm = GeminiLLMService(genai.Client(api_key=config.gemini.api_key), config.gemini)

    line_api = MessagingApi(
        ApiClient(Configuration(access_token=config.line.channel_access_token))
    )

    redis_client = redis.Redis(
        host=config.redis.host,
        port=config.redis.port,
        db=config.redis.db,
        decode_responses=True,
    )

    logger.info(
        "Services built",
        extra={
            "bucket_name": config.minio.bucket_name,
            "model": config.gemini.model_name,
            "assembly_strategy": config.pipeline.assembly_strategy,
        },
    )
    return create_services(
        config,
        storage,
        transcriber,
        llm,
        LineMessagingService(line_api),
        RedisMarkerStore(redis_client),
    )


def get_services(request: Request) -> Services:
    """Returns the services stored on the application."""
    return request.app.state.services


def get_config(request: Request) -> AppConfig:
    return get_services(request).config


def get_storage(request: Request) -> ObjectStorage:
    return get_services(request).storage


def get_messenger(request: Request) -> MessagingService:
    return get_services(request).messenger


def get_finalize_handler(request: Request) -> FinalizeHandler:
    return get_services(request).finalize_handler


def get_poll_handler(request: Request) -> JobPollHandler:
    return get_services(request).poll_handler
