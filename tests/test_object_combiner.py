import io
import math

import pytest
from conftest import InMemoryStorage

from yorisoi.domain.object_combiner import ObjectCombiner, compose_prefix
from yorisoi.exceptions import CapabilityUnavailableError


def _put_chunks(storage: InMemoryStorage, count: int, size: int = 3) -> list[str]:
    names = []
    for i in range(count):
        name = f"sessions/s1/chunk-{i + 1:05d}.webm"
        data = bytes([i % 256]) * size
        storage.upload(name, io.BytesIO(data), len(data), "audio/webm")
        names.append(name)
    return names


def _expected(storage: InMemoryStorage, names: list[str]) -> bytes:
    return b"".join(storage.objects[name] for name in names)


@pytest.mark.parametrize("count", [2, 32, 33, 100, 1100])
def test_combine_rounds_and_content(storage: InMemoryStorage, count: int) -> None:
    names = _put_chunks(storage, count)
    expected = _expected(storage, names)

    rounds = ObjectCombiner(storage, fan_in=32).combine(names, "sessions/s1/assembled.webm")

    assert rounds == math.ceil(math.log(count, 32))
    assert storage.objects["sessions/s1/assembled.webm"] == expected
    assert storage.list_objects(compose_prefix("sessions/s1/assembled.webm")) == []
    assert all(len(sources) <= 32 for sources, _ in storage.compose_calls)
    assert storage.compose_calls[-1][1] == "sessions/s1/assembled.webm"


def test_single_object_is_copied(storage: InMemoryStorage) -> None:
    names = _put_chunks(storage, 1)
    rounds = ObjectCombiner(storage).combine(names, "sessions/s1/assembled.webm")
    assert rounds == 0
    assert storage.objects["sessions/s1/assembled.webm"] == storage.objects[names[0]]
    assert storage.compose_calls == []


def test_small_fan_in_builds_a_deeper_tree(storage: InMemoryStorage) -> None:
    names = _put_chunks(storage, 10)
    expected = _expected(storage, names)
    rounds = ObjectCombiner(storage, fan_in=3).combine(names, "out.webm")
    assert rounds == 3
    assert storage.objects["out.webm"] == expected


def test_unsupported_compose_falls_back_to_local_merge() -> None:
    storage = InMemoryStorage(compose_min_size=1024)
    names = _put_chunks(storage, 40)
    expected = _expected(storage, names)

    ObjectCombiner(storage, fan_in=32).combine(names, "out.webm")

    assert storage.objects["out.webm"] == expected
    assert storage.compose_calls == []
    assert storage.list_objects(compose_prefix("out.webm")) == []


def test_unsupported_compose_without_fallback_raises() -> None:
    storage = InMemoryStorage(compose_min_size=1024)
    names = _put_chunks(storage, 40)

    with pytest.raises(CapabilityUnavailableError):
        ObjectCombiner(storage, fan_in=32, local_fallback=False).combine(names, "out.webm")
    assert storage.list_objects(compose_prefix("out.webm")) == []
    assert "out.webm" not in storage.objects


def test_combine_requires_objects(storage: InMemoryStorage) -> None:
    with pytest.raises(ValueError):
        ObjectCombiner(storage).combine([], "out.webm")


def test_fan_in_must_allow_merging(storage: InMemoryStorage) -> None:
    with pytest.raises(ValueError):
        ObjectCombiner(storage, fan_in=1)
