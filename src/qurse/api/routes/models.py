"""Model catalog endpoint."""

from fastapi import APIRouter

from qurse.api.deps import ConfigDep, ModelCatalogDep
from qurse.api.schemas import ModelsResponse

router = APIRouter()


@router.get("/models", response_model=ModelsResponse)
async def list_models(catalog: ModelCatalogDep, config: ConfigDep) -> ModelsResponse:
    """List the enabled model groups."""
    return ModelsResponse(
        groups={key: g.to_dict() for key, g in catalog.enabled_groups().items()},
        default_model=config.llm.default_model,
    )
