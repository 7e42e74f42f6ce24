import base64
import json

from tests.fakes import SHARDS


# ── POST /get-pronunciation ─────────────────────────────────

def test_pronunciation_success(client, synthesizer):
    response = client.post("/get-pronunciation", json={"word": " Color ", "accent": "en-GB", "isMale": False})

    assert response.status_code == 200
    assert response.headers["etag"]
    assert response.headers["cache-control"] == "private, max-age=604800"
    assert response.headers["server-timing"].startswith("total;dur=")
    body = response.json()
    assert base64.b64decode(body["audioContent"]) == b"mp3:color:en-GB-Wavenet-F"
    assert body["phonetic"] == "ˈkʌlə"
    assert body["examples"][0] == {"text": "What color is the sky?", "partOfSpeech": ""}
    assert body["audioMetadata"] == {
        "format": "mp3", "accent": "en-GB", "voiceId": "en-GB-Wavenet-F", "speed": "normal",
    }
    assert set(body) == {
        "audioContent", "phonetic", "meanings", "examples", "synonyms", "antonyms", "audioMetadata",
    }
    assert synthesizer.calls == [("color", "en-GB-Wavenet-F", 0.9)]


def test_pronunciation_defaults(client):
    body = client.post("/get-pronunciation", json={"word": "echo"}).json()

    assert body["audioMetadata"]["accent"] == "en-US"
    assert body["audioMetadata"]["voiceId"] == "en-US-Wavenet-D"
    assert body["audioMetadata"]["speed"] == "normal"


def test_repeat_request_is_served_from_cache(client, synthesizer, dictionary):
    first = client.post("/get-pronunciation", json={"word": "happy"})
    second = client.post("/get-pronunciation", json={"word": "happy"})

    assert first.headers["x-cache"] == "MISS"
    assert second.headers["x-cache"] == "HIT"
    assert second.content == first.content
    assert second.headers["etag"] == first.headers["etag"]
    assert len(synthesizer.calls) == 1
    assert len(dictionary.calls) == 1


def test_if_none_match_returns_304(client):
    etag = client.post("/get-pronunciation", json={"word": "echo"}).headers["etag"]

    response = client.post("/get-pronunciation", json={"word": "echo"}, headers={"If-None-Match": etag})

    assert response.status_code == 304
    assert response.content == b""
    assert response.headers["etag"] == etag


def test_etag_differs_per_key(client):
    a = client.post("/get-pronunciation", json={"word": "echo", "speed": "slow"}).headers["etag"]
    b = client.post("/get-pronunciation", json={"word": "echo", "speed": "fast"}).headers["etag"]

    assert a != b


def test_empty_word_is_400(client):
    response = client.post("/get-pronunciation", json={"word": ""})

    assert response.status_code == 400
    assert response.json() == {"error": "Word is required."}


def test_missing_word_is_400(client):
    assert client.post("/get-pronunciation", json={}).status_code == 400


def test_unsupported_accent_is_400(client, synthesizer):
    response = client.post("/get-pronunciation", json={"word": "echo", "accent": "zz-ZZ"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid accent selected"}
    assert synthesizer.calls == []


def test_malformed_body_is_400(client):
    response = client.post(
        "/get-pronunciation", content="not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert "error" in response.json()


def test_synthesis_failure_is_500(client, synthesizer):
    synthesizer.fail = True

    response = client.post("/get-pronunciation", json={"word": "Echo"})

    assert response.status_code == 500
    assert response.json() == {
        "error": "Error processing pronunciation request",
        "suggestion": "Please try again in a moment",
        "word": "echo",
    }


def test_definition_outage_still_200(client, dictionary):
    dictionary.fail = True

    response = client.post("/get-pronunciation", json={"word": "echo"})

    assert response.status_code == 200
    assert response.json()["phonetic"] == "ˈɛkoʊ"


# ── GET /health ─────────────────────────────────────────────

def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert isinstance(body["timestamp"], int)


# ── GET /data/{letter}.json ─────────────────────────────────

def test_shard_proxy(client, fetcher):
    response = client.get("/data/c.json")

    assert response.status_code == 200
    assert response.json() == SHARDS["c"]
    assert response.headers["cache-control"] == "public, max-age=31536000, immutable"
    assert response.headers["etag"]

    client.get("/data/C.json")
    assert fetcher.count("c") == 1


def test_shard_proxy_conditional(client):
    etag = client.get("/data/e.json").headers["etag"]

    response = client.get("/data/e.json", headers={"If-None-Match": etag})

    assert response.status_code == 304
    assert response.content == b""


def test_shard_proxy_rejects_non_letters(client):
    for bad in ("1", "ab", "é"):
        response = client.get(f"/data/{bad}.json")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid letter"}


def test_shard_proxy_upstream_failure_is_502(client, fetcher):
    response = client.get("/data/z.json")

    assert response.status_code == 502
    assert response.json() == {"error": "Upstream data unavailable"}
    assert fetcher.count("z") == 1

    fetcher.datasets["z"] = json.dumps({"zebra": {}}).encode()
    assert client.get("/data/z.json").status_code == 200


# ── GET /reload-phonetics ───────────────────────────────────

def test_reload_phonetics(client, fetcher):
    client.post("/get-pronunciation", json={"word": "color"})

    response = client.get("/reload-phonetics")

    assert response.status_code == 200
    assert response.json() == {"status": "success", "entries": 3}
    assert fetcher.count("phonetics") == 2


def test_reload_phonetics_failure(client, fetcher):
    fetcher.failing.add("phonetics")

    response = client.get("/reload-phonetics")

    assert response.status_code == 500
    assert response.json() == {"status": "error"}


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
