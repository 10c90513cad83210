import pytest

from shortly.router import Router
from shortly.types import HttpStatus, Method, Request, Response


class RecordingHandler:
    def __init__(self, body):
        self.body = body
        self.requests = []

    async def handle(self, request):
        self.requests.append(request)
        return Response(status=HttpStatus.CREATED, body=self.body)


@pytest.mark.asyncio
async def test_routes_to_registered_handler():
    router = Router()
    handler = RecordingHandler("made")
    router.add_route(Method.POST, "/shortly", handler)
    request = Request(method=Method.POST, target="/shortly", body="x")

    response = await router.route(request)

    assert response.status == HttpStatus.CREATED
    assert response.body == "made"
    assert handler.requests == [request]


@pytest.mark.asyncio
async def test_unknown_path_is_not_found():
    router = Router()
    router.add_route(Method.POST, "/shortly", RecordingHandler("made"))
    response = await router.route(Request(method=Method.POST, target="/other"))
    assert response.status == HttpStatus.NOT_FOUND
    assert response.headers == {"Content-Type": "text/plain"}
    assert response.body == "Not Found"


@pytest.mark.asyncio
async def test_method_mismatch_is_not_found():
    router = Router()
    handler = RecordingHandler("made")
    router.add_route(Method.POST, "/shortly", handler)
    response = await router.route(Request(method=Method.GET, target="/shortly"))
    assert response.status == HttpStatus.NOT_FOUND
    assert handler.requests == []


@pytest.mark.asyncio
async def test_unknown_method_is_not_registered():
    router = Router()
    handler = RecordingHandler("made")
    router.add_route(Method.UNKNOWN, "/shortly", handler)
    response = await router.route(Request(method=Method.UNKNOWN, target="/shortly"))
    assert response.status == HttpStatus.NOT_FOUND
    assert handler.requests == []


@pytest.mark.asyncio
async def test_empty_path_and_missing_handler_are_ignored():
    router = Router()
    router.add_route(Method.GET, "", RecordingHandler("made"))
    router.add_route(Method.GET, "/a", None)
    assert (await router.route(Request(method=Method.GET, target=""))).status == (
        HttpStatus.NOT_FOUND
    )
    assert (await router.route(Request(method=Method.GET, target="/a"))).status == (
        HttpStatus.NOT_FOUND
    )


@pytest.mark.asyncio
async def test_later_registration_replaces_earlier():
    router = Router()
    router.add_route(Method.PUT, "/p", RecordingHandler("first"))
    router.add_route(Method.PUT, "/p", RecordingHandler("second"))
    response = await router.route(Request(method=Method.PUT, target="/p"))
    assert response.body == "second"