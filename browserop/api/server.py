"""FastAPI server exposing configuration checks and execution over HTTP."""

import logging
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from browserop.cli.handlers import VerifyResult
from browserop.config.service import ConfigLoader
from browserop.config.views import OperationConfig, OperationConfigError
from browserop.operation import execute_operation
from browserop.registry.service import get_registered_commands
from browserop.shared_views import BackendType, ExecutionResult

# Load environment variables (used by ${getenv:...} placeholders)
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

tags_dict: Dict[str, Optional[List[Union[str, Enum]]]] = {
    "commands": ["Commands"],
    "config": ["Configuration"],
    "execution": ["Execution"],
}
# Global service instances
config_loader: ConfigLoader | None = None


# ==================== REQUEST/RESPONSE MODELS ====================


class VerifyRequest(BaseModel):
    """Configuration to check, either as YAML text or as an object."""

    yaml: str | None = Field(default=None, description="Raw YAML configuration")
    config: dict[str, Any] | None = Field(
        default=None, description="Configuration object (not interpolated)"
    )


class ExecuteRequest(BaseModel):
    """Configuration to execute against the remote-protocol backend."""

    yaml: str | None = Field(default=None, description="Raw YAML configuration")
    config: dict[str, Any] | None = Field(
        default=None, description="Configuration object (not interpolated)"
    )
    commands: list[dict[str, Any]] | None = Field(
        default=None, description="Bare command list"
    )
    base_url: str | None = Field(default=None, description="Override settings.baseUrl")
    timeout: int | None = Field(default=None, description="Override settings.timeout")
    continue_on_error: bool | None = Field(
        default=None, description="Override settings.continueOnError"
    )


def _load(
    yaml_text: str | None,
    config: dict[str, Any] | None,
    commands: list[dict[str, Any]] | None = None,
) -> OperationConfig:
    assert config_loader is not None

    if yaml_text is not None:
        return config_loader.parse_yaml(yaml_text)
    if config is not None:
        return config_loader.validate(config)
    if commands is not None:
        return config_loader.validate_commands(commands)

    raise HTTPException(
        status_code=422, detail="Provide one of: yaml, config, commands"
    )


# ==================== LIFECYCLE ====================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for the API."""
    global config_loader

    logger.info("🚀 Initializing browserop API services...")

    config_loader = ConfigLoader()

    logger.info(
        f"✅ browserop API ready ({len(get_registered_commands())} commands registered)"
    )

    yield

    logger.info("🛑 Shutting down browserop API...")


# Create FastAPI app
app = FastAPI(
    title="browserop API",
    description="Declarative browser operation executor",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== HEALTH CHECK ====================


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "service": "browserop API",
        "version": "1.0.0",
        "status": "running",
        "registered_commands": len(get_registered_commands()),
    }


# ==================== COMMAND ENDPOINTS ====================


@app.get(
    "/api/v1/commands",
    response_model=dict[str, list[str]],
    tags=tags_dict["commands"],
)
async def list_commands():
    """List the command names executors are registered for."""
    return {"commands": get_registered_commands()}


# ==================== CONFIGURATION ENDPOINTS ====================


@app.post(
    "/api/v1/verify",
    response_model=VerifyResult,
    tags=tags_dict["config"],
)
async def verify_config(request: VerifyRequest):
    """Check a configuration without executing it.

    Invalid configurations are reported in the body with ``valid: false``.
    """
    if not config_loader:
        raise HTTPException(status_code=503, detail="Config loader not available")

    try:
        config = _load(request.yaml, request.config)
        return VerifyResult(valid=True, config=config)
    except OperationConfigError as e:
        logger.info(f"Configuration rejected ({e.kind.value})")
        return VerifyResult(valid=False, error=str(e))


# ==================== EXECUTION ENDPOINTS ====================


@app.post(
    "/api/v1/execute",
    response_model=ExecutionResult,
    tags=tags_dict["execution"],
)
async def execute(request: ExecuteRequest):
    """Execute a configuration against the remote-protocol backend.

    Command failures are part of the returned result; only configuration
    errors produce a 400.

    Example:
            POST /api/v1/execute
            {
                    "commands": [{"command": "navigate", "url": "https://example.com"}],
                    "continue_on_error": true
            }
    """
    if not config_loader:
        raise HTTPException(status_code=503, detail="Config loader not available")

    try:
        config = _load(request.yaml, request.config, request.commands)
    except OperationConfigError as e:
        raise HTTPException(
            status_code=400, detail={"kind": e.kind.value, "message": str(e)}
        )

    context = {"backend": BackendType.CDP}
    if request.base_url is not None:
        context["base_url"] = request.base_url
    if request.timeout is not None:
        context["timeout"] = request.timeout
    if request.continue_on_error is not None:
        context["continue_on_error"] = request.continue_on_error

    try:
        return await execute_operation(context, config, loader=config_loader)
    except Exception as e:
        logger.error(f"Error executing operation: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
