"""FastAPI application exposing the prompt pipeline as dry-run endpoints"""

import logging
from datetime import datetime
from typing import List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api_types import GenerateRequest, PromptResponse, PayloadResponse, ModelInfoResponse, ErrorResponse
from ..builders import MODEL_REGISTRY, construct_prompt, get_builder, resolve_model_family
from ..builders.constructor import target_model
from ..core.config import CORS_ORIGINS, setup_logging
from ..core.errors import ContractViolationError

setup_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Clip Studio Prompt Service",
    description="Builds model prompts and generation payloads for episode clips",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials="*" not in CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ContractViolationError)
async def contract_violation_handler(request: Request, exc: ContractViolationError):
    """Malformed collaborator input surfaces as a client error"""
    logger.error(f"[API] Contract violation on {request.url.path}: {str(exc)}")
    body = ErrorResponse(error="Contract violation", details=str(exc))
    return JSONResponse(status_code=422, content=body.model_dump(mode="json"))


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "name": "Clip Studio Prompt Service",
        "version": "1.0.0",
        "status": "running"
    }


@app.get("/health")
def health():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat()
    }


@app.get("/models", response_model=List[ModelInfoResponse])
def list_models():
    """List registered generation models"""
    return [
        ModelInfoResponse(
            id=model_id,
            label=info["label"],
            family=info["family"].value,
            internal_id=info["internal_id"],
            is_image=info["is_image"],
            has_audio=info["has_audio"],
            description=info.get("description")
        )
        for model_id, info in MODEL_REGISTRY.items()
    ]


@app.post("/prompt", response_model=PromptResponse)
def build_prompt(request: GenerateRequest):
    """Construct the prompt and image list without building a payload"""
    context = request.to_context()
    constructed = construct_prompt(context)
    return PromptResponse(
        prompt=constructed["prompt"],
        image_urls=constructed["image_urls"],
        warnings=constructed["warnings"],
        schema_name=constructed["schema"],
        fallback_used=constructed["fallback_used"]
    )


@app.post("/payload", response_model=PayloadResponse)
def build_payload(request: GenerateRequest):
    """Build the provider payload (dry run: nothing is submitted)"""
    context = request.to_context()
    model = target_model(context)
    builder = get_builder(model)
    payload = builder.build(context)
    logger.info(f"[API] Dry-run payload for model '{model}' via {builder.name}")
    return PayloadResponse(
        family=resolve_model_family(model).value,
        builder=builder.name,
        payload=payload
    )
