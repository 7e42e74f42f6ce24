"""FastAPI dependencies resolving the per-process services."""

from fastapi import Request

from app.container import Services
from app.services.datasets import DatasetStore
from app.services.orchestrator import PronunciationOrchestrator


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_orchestrator(request: Request) -> PronunciationOrchestrator:
    return get_services(request).orchestrator


def get_datasets(request: Request) -> DatasetStore:
    return get_services(request).datasets
