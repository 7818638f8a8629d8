"""Tests for the in-memory S3 test double."""

from io import BytesIO

import pytest
from botocore.exceptions import ClientError

from s3dirfs.errors import is_not_found_error
from s3dirfs.testing import InMemoryS3Client


class TestInMemoryS3Client:
    """Test that the fake behaves like S3 where s3dirfs relies on it."""

    @pytest.mark.asyncio
    async def test_missing_keys_raise_not_found(self):
        client = InMemoryS3Client()

        with pytest.raises(ClientError) as head_error:
            await client.head_object(Bucket="test-bucket", Key="nope")
        with pytest.raises(ClientError) as get_error:
            await client.get_object(Bucket="test-bucket", Key="nope")

        assert is_not_found_error(head_error.value)
        assert is_not_found_error(get_error.value)

    @pytest.mark.asyncio
    async def test_unknown_bucket(self):
        client = InMemoryS3Client()
        with pytest.raises(ClientError) as error:
            await client.put_object(Bucket="other", Key="a", Body=b"")
        assert error.value.response["Error"]["Code"] == "NoSuchBucket"
        assert not is_not_found_error(error.value)

    @pytest.mark.asyncio
    async def test_put_accepts_streams_and_sets_md5_etag(self):
        client = InMemoryS3Client()
        await client.put_object(Bucket="test-bucket", Key="a", Body=BytesIO(b"hello"))

        head = await client.head_object(Bucket="test-bucket", Key="a")

        assert head["ContentLength"] == 5
        assert head["ETag"] == '"5d41402abc4b2a76b9719d911017c592"'

    @pytest.mark.asyncio
    async def test_delimiter_groups_common_prefixes(self):
        client = InMemoryS3Client()
        for key in ("d/", "d/a.txt", "d/x/1", "d/x/2", "d/y/"):
            await client.put_object(Bucket="test-bucket", Key=key, Body=b"")

        page = await client.list_objects_v2(Bucket="test-bucket", Prefix="d/", Delimiter="/")

        assert [entry["Key"] for entry in page["Contents"]] == ["d/", "d/a.txt"]
        assert page["CommonPrefixes"] == [{"Prefix": "d/x/"}, {"Prefix": "d/y/"}]
        assert page["IsTruncated"] is False

    @pytest.mark.asyncio
    async def test_pagination_tokens(self):
        client = InMemoryS3Client(max_keys=2)
        for key in ("p/1", "p/2", "p/3"):
            await client.put_object(Bucket="test-bucket", Key=key, Body=b"")

        first = await client.list_objects_v2(Bucket="test-bucket", Prefix="p/")
        second = await client.list_objects_v2(
            Bucket="test-bucket", Prefix="p/", ContinuationToken=first["NextContinuationToken"]
        )

        assert [entry["Key"] for entry in first["Contents"]] == ["p/1", "p/2"]
        assert first["IsTruncated"] is True
        assert [entry["Key"] for entry in second["Contents"]] == ["p/3"]
        assert second["IsTruncated"] is False
        assert "NextContinuationToken" not in second

    @pytest.mark.asyncio
    async def test_paginator_follows_tokens(self):
        client = InMemoryS3Client(max_keys=2)
        for key in ("p/1", "p/2", "p/3", "p/4", "p/5"):
            await client.put_object(Bucket="test-bucket", Key=key, Body=b"")

        paginator = client.get_paginator("list_objects_v2")
        pages = [page async for page in paginator.paginate(Bucket="test-bucket", Prefix="p/")]

        assert [[entry["Key"] for entry in page["Contents"]] for page in pages] == [
            ["p/1", "p/2"],
            ["p/3", "p/4"],
            ["p/5"],
        ]
        tokens = [op.kwargs["ContinuationToken"] for op in client.calls("list_objects_v2")]
        assert tokens == [None, "p/2", "p/4"]

    def test_paginator_rejects_other_operations(self):
        with pytest.raises(ValueError, match="cannot be paginated"):
            InMemoryS3Client().get_paginator("list_buckets")

    @pytest.mark.asyncio
    async def test_delete_objects_limit(self):
        client = InMemoryS3Client()
        with pytest.raises(ClientError):
            await client.delete_objects(
                Bucket="test-bucket",
                Delete={"Objects": [{"Key": str(index)} for index in range(1001)]},
            )
