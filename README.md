# shortly

`shortly` is a small asynchronous HTTP service that shortens URLs. It accepts a
JSON request, forwards the long URL to an upstream shortening provider (Bitly
or TinyURL) over HTTPS, caches the result in Redis and answers with a JSON
document.

## Installation

```console
pip install .
```

To run the test suite as well:

```console
pip install ".[test]"
pytest
```

## Configuration

The service reads its settings from the environment:

| Variable          | Meaning                                         |
|-------------------|-------------------------------------------------|
| `REDIS_HOST`      | Host name of the Redis server (default `localhost`) |
| `REDIS_PORT`      | Port of the Redis server (default `6379`)       |
| `API_KEY_BITLY`   | Access token for the Bitly API                  |
| `API_KEY_TINYURL` | Access token for the TinyURL API                |

A provider whose key is missing or empty refuses to work, and the request is
answered with `500 Internal Server Error`.

```console
export REDIS_HOST=localhost
export REDIS_PORT=6379
export API_KEY_BITLY=placeholder
export API_KEY_TINYURL=placeholder
```

## Running the server

```console
shortly
```

By default the server listens on `0.0.0.0`, port 8080. Both can be changed:

```console
shortly --host 127.0.0.1 --port 9000
```

It shuts down cleanly on `SIGINT` or `SIGTERM`. Upstream connections use TLS
1.3 with certificate verification against the system's trust store.

## The API

There is one route, `POST /shortly`. Its body is a JSON object with a
mandatory `url` key and an optional `provider` key; no other keys are allowed.
`provider` may be `"bitly"` or `"tinyurl"`; any other string, or leaving it
out, selects Bitly.

```console
curl -X POST http://localhost:8080/shortly \
     -H 'Content-Type: application/json' \
     -d '{"url": "https://example.com/some/long/path", "provider": "tinyurl"}'
```

A successful answer has status `200`:

```json
{"result":0,"reason":"","data":{"url":"https://example.com/some/long/path","shortened":"https://tinyurl.com/abc123"}}
```

Failures carry `"result": 1` and a human-readable `reason`:

* `400 Bad Request` for an empty body, malformed JSON, a body that is not an
  object, too few or too many keys, missing or unexpected keys, or an empty
  `url`;
* the upstream provider's own status code (for example `503`) together with
  the provider's error message when the provider rejects the request;
* `503 Service Unavailable` when the provider's host cannot be resolved or
  connected to, and `502 Bad Gateway` when the TLS handshake, sending or
  reading fails;
* `500 Internal Server Error` when a provider key is missing or the provider's
  answer lacks the short URL.

Any other method or path is answered with `404 Not Found` and a plain-text
body.

Repeated requests for the same URL are served from the Redis cache without
contacting the provider again; cached entries expire after one hour.

## Limits

* Each connection serves exactly one request and is then closed; there is no
  keep-alive.
* Request bodies are limited to 1 MiB.
* A Redis server must be reachable. If it is not, the request fails and the
  connection is closed without an answer.

## Using the pieces as a library

The request pipeline is built from small, replaceable parts:

* `shortly.types` — `Request`, `Response`, `RequestInfo`, `Endpoint`,
  `HttpStatus`, `Method` and `ProviderType`;
* `shortly.validation` — `KeyCountRule`, `KeyRule` and `JsonValidator`, which
  raises `shortly.exceptions.ValidationError` on invalid input;
* `shortly.parser` — `JsonParser`, which turns a request body into the URL and
  a `ProviderType`, and `provider_type_from_name`;
* `shortly.providers` — `Bitly`, `TinyURL` and `ProviderFactory`; provider
  failures raise `shortly.exceptions.ProviderError`, which carries an HTTP
  status in its `code` attribute;
* `shortly.handler` — `ShortlyHandler`, which ties parser and providers
  together and returns a `Response`;
* `shortly.dns` — `DnsCache` and `DnsResolver`;
* `shortly.http_client` — `HttpClient`, an HTTPS client that posts JSON;
* `shortly.redis_cache` — `RedisCache`;
* `shortly.wire` — HTTP/1.1 framing: `serialize_request`,
  `serialize_response`, `read_request` and `read_response`;
* `shortly.router` and `shortly.server` — `Router`, `Session`, `Server` and
  `ServerSettings` for serving handlers over HTTP;
* `shortly.app` — `Application`, which wires everything together, and
  `main`, the command-line entry point.

The interfaces the parts rely on (`CacheClient`, `HttpClientPort`,
`EnvReader`, `ValidationRule`, `Handler`) are protocols in `shortly.ports`, so
any of them can be swapped for your own object.

```python
from shortly.parser import JsonParser
from shortly.validation import JsonValidator, KeyCountRule, KeyRule

validator = JsonValidator([KeyCountRule(1, 2), KeyRule(["url"], {"provider"})])
parser = JsonParser(validator)

url, provider_type = parser.parse('{"url": "https://example.com", "provider": "tinyurl"}')
```