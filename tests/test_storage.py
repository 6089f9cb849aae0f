"""Tests for the storage backends."""

from __future__ import annotations

from io import BytesIO

import pytest
from botocore.exceptions import ClientError

from storage import LocalStorage, S3Storage
from utils.errors import InternalConfiguration


class _FakeS3Client:
    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.uploads = []

    def upload_fileobj(self, file_obj, bucket, key, ExtraArgs=None):
        self.uploads.append((bucket, key, ExtraArgs))
        self.objects[key] = file_obj.read()

    def delete_object(self, Bucket, Key):
        self.objects.pop(Key, None)

    def head_object(self, Bucket, Key):
        if Key not in self.objects:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject")
        return {}


def test_local_storage_round_trip(tmp_path):
    storage = LocalStorage(str(tmp_path / "media"))

    url = storage.save(BytesIO(b"audio"), "clip.wav")

    assert url.startswith("file://")
    assert storage.exists("clip.wav")
    assert (tmp_path / "media" / "clip.wav").read_bytes() == b"audio"

    storage.delete("clip.wav")
    assert not storage.exists("clip.wav")


def test_local_storage_rejects_path_traversal(tmp_path):
    storage = LocalStorage(str(tmp_path / "media"))

    storage.save(BytesIO(b"x"), "../../escape.wav")

    assert not (tmp_path / "escape.wav").exists()
    assert storage.exists("escape.wav")


def test_s3_storage_uploads_with_content_type():
    client = _FakeS3Client()
    storage = S3Storage("voces-audio", region="us-east-1", client=client)

    url = storage.save(BytesIO(b"audio"), "clip.mp3", content_type="audio/mpeg")

    assert url == "https://voces-audio.s3.us-east-1.amazonaws.com/clip.mp3"
    assert client.uploads == [("voces-audio", "clip.mp3", {"ContentType": "audio/mpeg"})]
    assert storage.exists("clip.mp3")

    storage.delete("clip.mp3")
    assert not storage.exists("clip.mp3")


def test_s3_storage_without_bucket_is_a_configuration_error():
    storage = S3Storage(None, client=_FakeS3Client())

    with pytest.raises(InternalConfiguration) as excinfo:
        storage.save(BytesIO(b"audio"), "clip.mp3")

    assert excinfo.value.description == "Server error: S3 bucket name not configured."
    assert excinfo.value.code == 500


def test_s3_client_errors_propagate():
    class _Failing(_FakeS3Client):
        def upload_fileobj(self, *args, **kwargs):
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")

    storage = S3Storage("voces-audio", client=_Failing())

    with pytest.raises(ClientError):
        storage.save(BytesIO(b"audio"), "clip.mp3")
