from fastapi import Depends, Request

from teamowners.core.config import Settings
from teamowners.data.registry import TeamRegistry
from teamowners.services.query_evaluator import QueryEvaluator
from teamowners.storage.file_source import FileOwnershipSource


def build_registry(settings: Settings) -> TeamRegistry:
    source = FileOwnershipSource(settings.manifest_dir, settings.link_file)
    return TeamRegistry(source)


def get_registry(request: Request) -> TeamRegistry:
    return request.app.state.registry


def get_query_evaluator(registry: TeamRegistry = Depends(get_registry)) -> QueryEvaluator:
    return QueryEvaluator(registry)
