import httpx
import pytest

from song_queue_service.client import SongQueueClient, SongQueueClientError


@pytest.fixture()
def queue_client(app):
    return SongQueueClient(base_url="http://testserver", transport=httpx.ASGITransport(app=app))


@pytest.mark.asyncio
async def test_requester_and_host_round(queue_client):
    created = await queue_client.submit_song("http://a.mp3", title="A", user="alice")
    await queue_client.submit_song("http://b.mp3")

    assert created["submittedAt"] == 1
    assert [song["url"] for song in await queue_client.list_songs()] == ["http://a.mp3", "http://b.mp3"]
    assert (await queue_client.peek_oldest())["url"] == "http://a.mp3"

    popped = await queue_client.pop_oldest()
    assert popped["title"] == "A"
    assert (await queue_client.get_history())[0]["url"] == "http://a.mp3"
    assert (await queue_client.get_stats())["current_queue_size"] == 1


@pytest.mark.asyncio
async def test_empty_queue_returns_none(queue_client):
    assert await queue_client.peek_oldest() is None
    assert await queue_client.pop_oldest() is None


@pytest.mark.asyncio
async def test_remove_song(queue_client):
    created = await queue_client.submit_song("http://a.mp3")

    assert await queue_client.remove_song(created["id"]) is True
    assert await queue_client.remove_song(created["id"]) is False


@pytest.mark.asyncio
async def test_invalid_submission_raises(queue_client):
    with pytest.raises(SongQueueClientError) as excinfo:
        await queue_client.submit_song("")

    assert excinfo.value.status_code == 400
    assert excinfo.value.message


@pytest.mark.asyncio
async def test_is_available(queue_client):
    assert await queue_client.is_available() is True


@pytest.mark.asyncio
async def test_unreachable_service_is_unavailable():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = SongQueueClient(transport=httpx.MockTransport(refuse))

    assert await client.is_available() is False
    assert await client.wait_for_service(max_retries=2, delay=0) is False
