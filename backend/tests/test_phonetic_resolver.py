import asyncio

import pytest

from app.services.dataset_cache import DatasetCache
from app.services.datasets import DatasetStore
from app.services.phonetic_resolver import PhoneticResolver

from tests.fakes import PHONETICS, SHARDS, FakeFetcher


@pytest.fixture
def fetcher():
    return FakeFetcher({"phonetics": PHONETICS, **SHARDS})


@pytest.fixture
def resolver(fetcher):
    store = DatasetStore(fetcher, DatasetCache("datasets"))
    return PhoneticResolver(store, DatasetCache("resolutions", default_ttl=3600))


def resolve(resolver, word, accent):
    return asyncio.run(resolver.resolve(word, accent))


def test_bulk_table_us_form(resolver):
    result = resolve(resolver, "color", "en-US")

    assert result.phonetic == "ˈkʌlər"
    assert result.source == "bulk"
    assert result.examples == ("What color is the sky?",)


def test_uk_accent_prefers_uk_form(resolver):
    assert resolve(resolver, "color", "en-GB").phonetic == "ˈkʌlə"
    assert resolve(resolver, "color", "en-IN").phonetic == "ˈkʌlə"
    assert resolve(resolver, "color", "en-AU").phonetic == "ˈkʌlər"


def test_falls_back_to_other_region_when_preferred_is_missing(resolver):
    assert resolve(resolver, "schedule", "en-US").phonetic == "ˈʃɛdjuːl"
    assert resolve(resolver, "echo", "en-GB").phonetic == "ˈɛkoʊ"


def test_multi_valued_field_keeps_first_alternative(resolver):
    assert resolve(resolver, "echo", "en-US").phonetic == "ˈɛkoʊ"


def test_shard_supplies_phonetic_when_bulk_has_none(resolver):
    us = resolve(resolver, "cat", "en-US")
    uk = resolve(resolver, "cat", "en-GB")

    assert (us.phonetic, us.source) == ("kæt", "shard")
    assert uk.phonetic == "kat"
    assert us.examples == ("The cat sat on the mat.",)
    assert us.meanings == ("A small domesticated carnivorous mammal.",)
    assert us.synonyms == ("feline",)


def test_bulk_phonetic_is_not_downgraded_by_shard(resolver):
    # the "c" shard has its own US form for "color"
    assert resolve(resolver, "color", "en-US").phonetic == "ˈkʌlər"


def test_shard_examples_used_when_no_curated_ones(resolver):
    result = resolve(resolver, "echo", "en-US")

    assert result.examples == ("We heard an echo.",)
    assert result.meanings == ("A reflected sound.",)


def test_not_found_is_cached(resolver, fetcher):
    first = resolve(resolver, "happy", "en-US")
    second = resolve(resolver, "happy", "en-US")

    assert first.phonetic is None
    assert second is first
    assert fetcher.count("h") == 1


def test_resolution_cache_survives_dataset_eviction(resolver, fetcher):
    resolve(resolver, "color", "en-US")
    resolver._store.cache.clear()
    resolve(resolver, "color", "en-US")

    assert fetcher.count("phonetics") == 1


def test_accents_are_cached_separately(resolver):
    assert resolve(resolver, "color", "en-US").phonetic != resolve(resolver, "color", "en-GB").phonetic


def test_non_letter_word_skips_shard(resolver, fetcher):
    result = resolve(resolver, "3d", "en-US")

    assert result.phonetic is None
    assert result.complete
    assert fetcher.calls == ["phonetics"]


def test_dataset_failure_degrades_and_is_not_cached(resolver, fetcher):
    fetcher.failing.add("phonetics")
    degraded = resolve(resolver, "cat", "en-US")

    assert degraded.phonetic == "kæt"
    assert not degraded.complete

    fetcher.failing.clear()
    recovered = resolve(resolver, "cat", "en-US")
    assert recovered.complete
    assert fetcher.count("phonetics") == 2


def test_missing_shard_is_a_failed_load(resolver, fetcher):
    result = resolve(resolver, "zebra", "en-US")

    assert result.phonetic is None
    assert not result.complete
    resolve(resolver, "zebra", "en-US")
    assert fetcher.count("z") == 2


def test_forget_drops_cached_resolutions(resolver, fetcher):
    resolve(resolver, "color", "en-US")
    resolver._store.cache.clear()
    resolver.forget()
    resolve(resolver, "color", "en-US")

    assert fetcher.count("phonetics") == 2


def test_concurrent_resolutions_share_one_dataset_fetch(fetcher):
    fetcher.delay = 0.01
    store = DatasetStore(fetcher, DatasetCache("datasets"))
    resolver = PhoneticResolver(store, DatasetCache("resolutions"))

    async def run():
        words = ["color", "cat", "echo", "schedule", "color", "cat"]
        return await asyncio.gather(*(resolver.resolve(w, "en-US") for w in words))

    results = asyncio.run(run())

    assert results[0].phonetic == "ˈkʌlər"
    assert fetcher.count("phonetics") == 1
    assert fetcher.count("c") == 1
