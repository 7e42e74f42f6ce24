"""Service wiring: one set of caches and clients per process.

``build_services()`` is called from the FastAPI lifespan; tests build a
``Services`` themselves with fake upstreams.
"""

from dataclasses import dataclass, field

import httpx

from app.config import Settings
from app.services.dataset_cache import DatasetCache
from app.services.datasets import DatasetStore, HttpDatasetFetcher
from app.services.definitions import DefinitionAggregator, DictionaryApiClient
from app.services.orchestrator import PronunciationOrchestrator
from app.services.phonetic_resolver import PhoneticResolver
from app.services.response_cache import ResponseCache
from app.services.synthesizer import GoogleCloudSynthesizer


@dataclass
class Services:
    datasets: DatasetStore
    resolver: PhoneticResolver
    orchestrator: PronunciationOrchestrator
    http_clients: list[httpx.AsyncClient] = field(default_factory=list)

    async def aclose(self) -> None:
        for client in self.http_clients:
            await client.aclose()


def build_services(
    settings: Settings,
    *,
    fetcher=None,
    definition_provider=None,
    synthesizer=None,
) -> Services:
    """Construct caches and services; any upstream may be replaced."""
    clients: list[httpx.AsyncClient] = []

    if fetcher is None:
        dataset_client = httpx.AsyncClient()
        clients.append(dataset_client)
        fetcher = HttpDatasetFetcher(dataset_client, settings.DATA_BASE_URL, settings.DATASET_TIMEOUT_S)

    if definition_provider is None:
        dictionary_client = httpx.AsyncClient(max_redirects=settings.DEFINITION_MAX_REDIRECTS)
        clients.append(dictionary_client)
        definition_provider = DictionaryApiClient(
            dictionary_client, settings.DICTIONARY_API_URL, settings.DEFINITION_TIMEOUT_S
        )

    if synthesizer is None:
        synthesizer = GoogleCloudSynthesizer(
            settings.GOOGLE_APPLICATION_CREDENTIALS, settings.SYNTHESIS_TIMEOUT_S
        )

    datasets = DatasetStore(
        fetcher,
        DatasetCache(
            "datasets",
            max_entries=settings.DATASET_CACHE_MAX_KEYS,
            inflight_timeout=settings.INFLIGHT_TIMEOUT_S,
        ),
        phonetics_key=settings.PHONETICS_DATASET_KEY,
        phonetics_ttl=settings.PHONETICS_TTL_S,
        shard_ttl=settings.SHARD_TTL_S,
    )
    resolver = PhoneticResolver(
        datasets,
        DatasetCache(
            "resolutions",
            default_ttl=settings.RESOLUTION_TTL_S,
            max_entries=settings.RESOLUTION_CACHE_MAX_KEYS,
        ),
    )
    responses = ResponseCache(
        DatasetCache(
            "responses",
            default_ttl=settings.RESPONSE_CACHE_TTL_S,
            max_entries=settings.RESPONSE_CACHE_MAX_KEYS,
            inflight_timeout=settings.INFLIGHT_TIMEOUT_S,
        )
    )
    orchestrator = PronunciationOrchestrator(
        responses,
        resolver,
        DefinitionAggregator(definition_provider, settings.DEFINITION_TIMEOUT_S),
        synthesizer,
    )
    return Services(datasets, resolver, orchestrator, clients)
