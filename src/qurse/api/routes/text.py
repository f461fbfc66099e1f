"""Text normalization endpoint."""

from fastapi import APIRouter

from qurse.api.schemas import NormalizeRequest, NormalizeResponse
from qurse.rendering import normalize

router = APIRouter()


@router.post("/normalize", response_model=NormalizeResponse)
async def normalize_text(request: NormalizeRequest) -> NormalizeResponse:
    """Convert bracket math to display math and repair malformed LaTeX."""
    text = normalize(request.text)
    return NormalizeResponse(text=text, changed=text != request.text)
