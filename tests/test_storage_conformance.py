"""Conformance suite every Storer backend must pass.

Runs once per constructor in conftest.STORER_FACTORIES.
"""

import threading

import pytest

from sup.errors import NotFoundError
from sup.models import File

from tests.conftest import sha256_hex


def _store(storer, data: bytes) -> str:
    digest = sha256_hex(data)
    writer = storer.begin_upload(digest)
    assert writer is not None
    writer.write(data)
    writer.close()
    return digest


class TestBeginUpload:
    """Test existence-checked creation."""

    def test_returns_writer_for_new_digest(self, storer):
        writer = storer.begin_upload(sha256_hex(b"new"))
        assert writer is not None
        writer.close()

    def test_returns_none_when_stored(self, storer):
        digest = _store(storer, b"stored once")
        assert storer.begin_upload(digest) is None

    def test_one_creator_per_digest(self, storer):
        """Racing reservations of one digest never yield two writers."""
        digest = sha256_hex(b"raced")
        writers = []
        errors = []

        def reserve():
            try:
                writers.append(storer.begin_upload(digest))
            except Exception as e:  # backend-defined refusal
                errors.append(e)

        threads = [threading.Thread(target=reserve) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        created = [w for w in writers if w is not None]
        assert len(created) == 1
        created[0].close()

    def test_different_digests_concurrently(self, storer):
        payloads = [f"payload-{i}".encode() for i in range(10)]
        digests = [None] * len(payloads)

        def store(i):
            digests[i] = _store(storer, payloads[i])

        threads = [threading.Thread(target=store, args=(i,)) for i in range(len(payloads))]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for data, digest in zip(payloads, digests):
            with storer.fetch(digest) as f:
                assert f.read() == data


class TestFetch:
    def test_returns_blob_bytes(self, storer):
        digest = _store(storer, b"hello, world")
        with storer.fetch(digest) as f:
            assert f.read() == b"hello, world"

    def test_fetch_twice(self, storer):
        digest = _store(storer, b"read me twice")
        for _ in range(2):
            with storer.fetch(digest) as f:
                assert f.read() == b"read me twice"

    def test_missing_raises_not_found(self, storer):
        digest = sha256_hex(b"missing")
        with pytest.raises(NotFoundError) as exc_info:
            storer.fetch(digest)
        assert exc_info.value.digest == digest


class TestDelete:
    def test_removes_blob(self, storer):
        digest = _store(storer, b"delete me")
        storer.delete(digest)
        with pytest.raises(NotFoundError):
            storer.fetch(digest)
        with pytest.raises(NotFoundError):
            storer.stat(digest)

    def test_absent_digest_is_noop(self, storer):
        storer.delete(sha256_hex(b"never stored"))

    def test_digest_reusable_after_delete(self, storer):
        digest = _store(storer, b"again")
        storer.delete(digest)
        assert storer.begin_upload(digest) is not None


class TestStat:
    def test_plain_bytes(self, storer):
        digest = _store(storer, b"hello, world")
        assert storer.stat(digest) == File(digest=digest, size=12, content_type="")

    def test_rederives_content_type(self, storer, gif_bytes):
        digest = _store(storer, gif_bytes)
        file = storer.stat(digest)
        assert file.content_type == "image/gif"
        assert file.size == len(gif_bytes)

    def test_missing_raises_not_found(self, storer):
        with pytest.raises(NotFoundError):
            storer.stat(sha256_hex(b"missing"))
