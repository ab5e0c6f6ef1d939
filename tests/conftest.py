import threading
from datetime import timedelta
from pathlib import Path
from typing import BinaryIO

import pytest

from yorisoi.config import (
    AppConfig,
    AssemblyAIConfig,
    GeminiConfig,
    LineConfig,
    MinioConfig,
    PipelineConfig,
    RedisConfig,
)
from yorisoi.domain.recognition import DirectResult, RecognitionPayload
from yorisoi.exceptions import (
    CapabilityUnavailableError,
    LLMServiceError,
    MessagingError,
    StorageDownloadError,
    TranscriptionError,
)
from yorisoi.infrastructure.interfaces import (
    LLMService,
    MarkerStore,
    MessagingService,
    ObjectStorage,
    TranscriptionService,
)


class InMemoryStorage(ObjectStorage):
    def __init__(self, compose_min_size: int = 0):
        self.objects: dict[str, bytes] = {}
        self.compose_calls: list[tuple[list[str], str]] = []
        self.compose_min_size = compose_min_size
        self._lock = threading.Lock()

    def upload(self, object_name: str, data: BinaryIO, size: int, content_type: str) -> None:
        with self._lock:
            self.objects[object_name] = data.read(size)

    def upload_file(self, object_name: str, path: Path, content_type: str) -> None:
        with self._lock:
            self.objects[object_name] = Path(path).read_bytes()

    def download(self, object_name: str) -> bytes:
        with self._lock:
            if object_name not in self.objects:
                raise StorageDownloadError(object_name)
            return self.objects[object_name]

    def download_to_file(self, object_name: str, path: Path) -> None:
        Path(path).write_bytes(self.download(object_name))

    def exists(self, object_name: str) -> bool:
        with self._lock:
            return object_name in self.objects

    def list_objects(self, prefix: str) -> list[str]:
        with self._lock:
            return sorted(name for name in self.objects if name.startswith(prefix))

    def delete(self, object_name: str) -> None:
        with self._lock:
            self.objects.pop(object_name, None)

    def copy(self, source: str, destination: str) -> None:
        with self._lock:
            self.objects[destination] = self.objects[source]

    def compose(self, sources: list[str], destination: str) -> None:
        with self._lock:
            if any(len(self.objects[s]) < self.compose_min_size for s in sources[:-1]):
                raise CapabilityUnavailableError(destination, "source too small")
            self.compose_calls.append((list(sources), destination))
            self.objects[destination] = b"".join(self.objects[s] for s in sources)

    def presigned_upload_url(self, object_name: str, expires: timedelta) -> str:
        return f"https://storage.test/put/{object_name}?expires={int(expires.total_seconds())}"

    def presigned_download_url(self, object_name: str, expires: timedelta) -> str:
        return f"https://storage.test/get/{object_name}"

    def object_uri(self, object_name: str) -> str:
        return f"s3://test-bucket/{object_name}"


class FakeLLM(LLMService):
    """Answers chunk prompts and reduce prompts from canned responses."""

    def __init__(self, chunk_response: str = "", reduce_response: str = ""):
        self.chunk_response = chunk_response
        self.reduce_response = reduce_response
        self.prompts: list[str] = []
        self._lock = threading.Lock()

    def generate_json(self, prompt: str) -> str:
        with self._lock:
            self.prompts.append(prompt)
        response = self.reduce_response if "【部分要約】" in prompt else self.chunk_response
        if isinstance(response, Exception):
            raise response
        if not response:
            raise LLMServiceError("no canned response")
        return response


class FakeTranscriber(TranscriptionService):
    def __init__(self):
        self.submitted: list[tuple[str, str]] = []
        self.payloads: dict[str, list[RecognitionPayload]] = {}
        self.failures_left = 0

    def submit(self, audio_url: str, language_code: str) -> str:
        if self.failures_left:
            self.failures_left -= 1
            raise TranscriptionError(audio_url)
        self.submitted.append((audio_url, language_code))
        job_id = f"job-{len(self.submitted)}"
        self.payloads[job_id] = [DirectResult(status="queued")]
        return job_id

    def fetch(self, job_id: str) -> list[RecognitionPayload]:
        return self.payloads[job_id]

    def complete(self, job_id: str, text: str) -> None:
        self.payloads[job_id] = [DirectResult(status="completed", text=text)]


class InMemoryMarkerStore(MarkerStore):
    def __init__(self):
        self.markers: dict[str, str] = {}
        self._lock = threading.Lock()

    def create_if_absent(self, key: str, value: str) -> bool:
        with self._lock:
            if key in self.markers:
                return False
            self.markers[key] = value
            return True


class FakeMessenger(MessagingService):
    def __init__(self, fail: bool = False):
        self.pushed: list[tuple[str, list[str]]] = []
        self.replies: list[tuple[str, list[str]]] = []
        self.fail = fail

    def push(self, recipient_id: str, messages: list[str]) -> None:
        if self.fail:
            raise MessagingError(recipient_id)
        self.pushed.append((recipient_id, list(messages)))

    def reply(self, reply_token: str, messages: list[str]) -> None:
        if self.fail:
            raise MessagingError("reply")
        self.replies.append((reply_token, list(messages)))


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        minio=MinioConfig(endpoint="minio:9000", user="test", password="test"),
        redis=RedisConfig(host="redis"),
        gemini=GeminiConfig(api_key="test", max_parallel=2),
        assemblyai=AssemblyAIConfig(api_key="test"),
        line=LineConfig(channel_access_token="test"),
        pipeline=PipelineConfig(data_dir=tmp_path / "data"),
    )
