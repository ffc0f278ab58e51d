"""
Devices API - FastAPI routes for commissioning and commanding devices.

Follows the same registration pattern as the other *_api modules: routes
are attached to an existing app and resolve the service lazily.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import clusters
from .errors import GatewayError

logger = logging.getLogger(__name__)


# ============================================================================
# PYDANTIC MODELS
# ============================================================================

class CommandRequest(BaseModel):
    """Cluster command to relay to a device."""
    cluster: str = Field(..., description="chip-tool cluster name (e.g. 'onoff')")
    command: str = Field(..., description="chip-tool command name (e.g. 'toggle')")
    args: List[str] = Field(default_factory=list, description="Positional command arguments")


class CommandResponse(BaseModel):
    success: bool
    message: str


class CommissionRequest(BaseModel):
    """Request to commission a new device onto the network."""
    pairing_code: int = Field(..., description="Setup pairing code")
    name: str = Field(..., description="Display name (e.g. 'Living Room Light')")


class CommissionResponse(BaseModel):
    success: bool
    id: Optional[int] = None
    message: str


# ============================================================================
# ROUTE REGISTRATION
# ============================================================================

def register_device_routes(
        app: FastAPI,
        service_or_getter: Union[Any, Callable[[], Any]],
):
    """
    Register API routes for device commissioning and control.

    Args:
        app: FastAPI app instance
        service_or_getter: GatewayService instance OR a callable returning it
    """

    def get_service():
        if callable(service_or_getter):
            return service_or_getter()
        return service_or_getter

    def require_service():
        service = get_service()
        if not service:
            raise HTTPException(status_code=503, detail="Gateway service not initialised")
        return service

    # -----------------------------------------------------------------
    # COMMANDS
    # -----------------------------------------------------------------

    @app.post("/devices/{node_id}/{endpoint_id}/command", tags=["devices"])
    async def device_command(node_id: int, endpoint_id: int, request: CommandRequest):
        """Validate a command against the device's capabilities and execute it."""
        service = require_service()
        try:
            result = await service.send_command(
                node_id, endpoint_id, request.cluster, request.command, request.args
            )
        except GatewayError as e:
            logger.warning(f"[node {node_id}] Command {request.cluster}/{request.command} rejected: {e}")
            return JSONResponse(
                status_code=e.status_code,
                content=CommandResponse(success=False, message=str(e)).model_dump(),
            )
        return CommandResponse(success=True, message=result.message)

    # -----------------------------------------------------------------
    # COMMISSIONING
    # -----------------------------------------------------------------

    @app.post("/devices/commission", tags=["devices"])
    async def device_commission(request: CommissionRequest):
        """Pair a device, discover its clusters/commands and store it."""
        service = require_service()
        try:
            device = await service.commission(request.pairing_code, request.name)
        except GatewayError as e:
            # Every commissioning failure is reported as a server error
            return JSONResponse(
                status_code=500,
                content=CommissionResponse(success=False, id=None, message=str(e)).model_dump(),
            )
        return CommissionResponse(
            success=True,
            id=device.node_id,
            message="Device commissioned successfully",
        )

    # -----------------------------------------------------------------
    # QUERY
    # -----------------------------------------------------------------

    @app.get("/devices", tags=["devices"])
    async def list_devices() -> List[Dict[str, Any]]:
        service = get_service()
        if not service:
            return []
        try:
            return [d.to_dict() for d in service.store.list_devices()]
        except GatewayError as e:
            raise HTTPException(status_code=e.status_code, detail=str(e))

    @app.get("/devices/{node_id}", tags=["devices"])
    async def get_device(node_id: int) -> Dict[str, Any]:
        """Get a device and its stored capability map."""
        service = require_service()
        try:
            return service.store.get_device(node_id).to_dict()
        except GatewayError as e:
            raise HTTPException(status_code=e.status_code, detail=str(e))

    @app.get("/clusters", tags=["devices"])
    async def list_clusters() -> Dict[str, List[str]]:
        """Clusters and commands the gateway can discover and validate."""
        return clusters.known_clusters()

    @app.get("/status", tags=["devices"])
    async def get_status() -> Dict[str, Any]:
        service = get_service()
        if not service:
            return {"ready": False}
        return {"ready": True, **service.get_status()}
