from shortly.types import (
    Endpoint,
    HttpStatus,
    Method,
    ProviderType,
    Request,
    RequestInfo,
    Response,
)


def test_status_codes_match_http_numbers():
    assert HttpStatus.NOT_FOUND == 404
    assert HttpStatus(503) is HttpStatus.SERVICE_UNAVAILABLE


def test_status_phrase():
    assert HttpStatus(404).phrase == "Not Found"


def test_every_status_has_a_phrase():
    phrases = [HttpStatus(int(status)).phrase for status in HttpStatus]
    assert len(phrases) == len(HttpStatus)
    assert all(isinstance(phrase, str) and phrase for phrase in phrases)


def test_provider_type_values():
    assert ProviderType(0) is ProviderType.BITLY
    assert ProviderType(1) is ProviderType.TINYURL


def test_method_lookup_by_name():
    assert Method("POST") is Method.POST
    assert Method("DELETE") is Method.DELETE


def test_request_defaults_are_independent():
    first = Request()
    second = Request()
    first.headers["Content-Type"] = "application/json"
    assert second.headers == {}
    assert first.body == ""


def test_response_defaults():
    response = Response()
    assert response.status is HttpStatus.OK
    assert response.headers == {}
    assert response.body == ""


def test_request_info_token_defaults_empty():
    info = RequestInfo("api-ssl.bitly.com", "/v4/shorten", "https")
    assert info.authorization_token == ""
    assert info.port == "https"


def test_endpoint_equality_and_hash():
    assert Endpoint("10.0.0.1", 53) == Endpoint("10.0.0.1", 53)
    assert len({Endpoint("10.0.0.1", 53), Endpoint("10.0.0.1", 53)}) == 1