"""Application configuration loaded from environment variables."""

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel


class MinioConfig(BaseModel, frozen=True):
    """MinIO connection configuration."""

    endpoint: str
    user: str
    password: str
    bucket_name: str = "yorisoi"
    secure: bool = False


class RedisConfig(BaseModel, frozen=True):
    """Redis connection configuration (delivery markers)."""

    host: str
    port: int = 6379
    db: int = 0


class GeminiConfig(BaseModel, frozen=True):
    """Gemini LLM configuration."""

    api_key: str
    model_name: str = "gemini-2.5-flash-lite"
    temperature: float = 0.3
    top_p: float = 0.8
    max_output_tokens: int = 2048
    max_parallel: int = 4


class AssemblyAIConfig(BaseModel, frozen=True):
    """AssemblyAI API configuration."""

    api_key: str
    language_code: str = "ja"
    punctuate: bool = True


class LineConfig(BaseModel, frozen=True):
    """LINE Messaging API configuration."""

    channel_access_token: str
    channel_secret: str = ""
    follow_greeting: str = (
        "友だち追加ありがとうございます。LIFFから録音して送ってください。"
    )


class LoudnessConfig(BaseModel, frozen=True):
    """EBU R128 targets passed to ffmpeg's loudnorm filter."""

    integrated: float = -16.0
    true_peak: float = -1.5
    loudness_range: float = 11.0


class PipelineConfig(BaseModel, frozen=True):
    """Knobs for the assembly and summarization pipeline."""

    data_dir: Path = Path("/tmp/data")
    ffmpeg_path: str = "ffmpeg"
    assembly_strategy: Literal["per_chunk", "compose"] = "per_chunk"
    compose_fan_in: int = 32
    compose_local_fallback: bool = True
    delete_chunks: bool = True
    normalize_loudness: bool = False
    trim_leading_silence: bool = False
    loudness: LoudnessConfig = LoudnessConfig()
    upload_url_expiry_minutes: int = 15
    chunk_max_chars: int = 6000
    chunk_lookahead: int = 200
    min_transcript_chars: int = 15
    message_char_limit: int = 4999


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    minio: MinioConfig
    redis: RedisConfig
    gemini: GeminiConfig
    assemblyai: AssemblyAIConfig
    line: LineConfig
    pipeline: PipelineConfig = PipelineConfig()
    allow_origin: str = "*"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config() -> AppConfig:
    """Loads configuration from environment variables."""
    return AppConfig(
        minio=MinioConfig(
            endpoint=os.getenv("MINIO_ENDPOINT", "minio:9000"),
            user=os.getenv("MINIO_USER", ""),
            password=os.getenv("MINIO_PASSWORD", ""),
            bucket_name=os.getenv("MINIO_BUCKET", "yorisoi"),
            secure=_env_bool("MINIO_SECURE", False),
        ),
        redis=RedisConfig(
            host=os.getenv("REDIS_HOST", "redis"),
            port=int(os.getenv("REDIS_PORT", "6379")),
            db=int(os.getenv("REDIS_DB", "0")),
        ),
        gemini=GeminiConfig(
            api_key=os.getenv("GEMINI_API_KEY", ""),
            model_name=os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite"),
            max_parallel=int(os.getenv("GEMINI_MAX_PARALLEL", "4")),
        ),
        assemblyai=AssemblyAIConfig(
            api_key=os.getenv("ASSEMBLYAI_API_KEY", ""),
            language_code=os.getenv("ASSEMBLYAI_LANGUAGE", "ja"),
        ),
        line=LineConfig(
            channel_access_token=os.getenv("LINE_CHANNEL_ACCESS_TOKEN", ""),
            channel_secret=os.getenv("LINE_CHANNEL_SECRET", ""),
        ),
        pipeline=PipelineConfig(
            data_dir=Path(os.getenv("DATA_DIR", "/tmp/data")),
            ffmpeg_path=os.getenv("FFMPEG_PATH", "ffmpeg"),
            assembly_strategy=os.getenv("PIPELINE_ASSEMBLY_STRATEGY", "per_chunk"),
            compose_local_fallback=_env_bool("PIPELINE_COMPOSE_LOCAL_FALLBACK", True),
            delete_chunks=_env_bool("PIPELINE_DELETE_CHUNKS", True),
            normalize_loudness=_env_bool("PIPELINE_NORMALIZE_LOUDNESS", False),
            trim_leading_silence=_env_bool("PIPELINE_TRIM_SILENCE", False),
            chunk_max_chars=int(os.getenv("PIPELINE_CHUNK_MAX_CHARS", "6000")),
        ),
        allow_origin=os.getenv("ALLOW_ORIGIN", "*"),
    )
