"""IDMC Assist backend using FastAPI + Mangum for AWS Lambda."""

import logging
from functools import lru_cache

from fastapi import APIRouter, FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from mangum import Mangum

from idmc_api.errors import ConfigurationError, ProviderError
from idmc_api.infra.runtime import (
    build_provider_bindings,
    ensure_langsmith_configured,
    flush_langsmith_traces,
    get_settings,
)
from idmc_api.model_registry import MODEL_OPTIONS, PROVIDER_CAPABILITIES
from idmc_api.schemas import AnswerResult, AskRequest, ModelMetadata
from idmc_api.services.dispatcher import RequestDispatcher
from idmc_api.ui import render_page

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

app = FastAPI()
router = APIRouter(prefix="/api")


@lru_cache(maxsize=1)
def get_dispatcher() -> RequestDispatcher:
    return RequestDispatcher(build_provider_bindings(get_settings()))


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    """Question form."""
    return render_page()


@router.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/models", response_model=list[ModelMetadata], response_model_by_alias=True)
def list_models() -> list[ModelMetadata]:
    """Return the selectable models and whether they accept a caller API key."""
    return [
        ModelMetadata(
            id=option.selector,
            label=option.label,
            provider=option.provider,
            accepts_api_key=PROVIDER_CAPABILITIES[option.provider].accepts_caller_credentials,
        )
        for option in MODEL_OPTIONS
    ]


@router.post("/ask", response_model=AnswerResult)
def ask(request: AskRequest) -> AnswerResult:
    """Forward the question to the selected model and return its answer."""
    try:
        ensure_langsmith_configured()
        return get_dispatcher().dispatch(
            question=request.question,
            model_selector=request.model_id,
            credential=request.api_key or None,
        )
    except ConfigurationError as e:
        logger.warning("Invalid ask request", extra={"reason": str(e)})
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ProviderError as e:
        logger.exception("Provider call failed")
        raise HTTPException(status_code=502, detail=str(e)) from e
    except Exception as e:
        logger.exception("Unexpected error while answering question")
        raise HTTPException(status_code=502, detail=str(e)) from e
    finally:
        flush_langsmith_traces()


app.include_router(router)


handler = Mangum(app)
