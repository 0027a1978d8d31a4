from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from ..dependencies import get_health_prober
from ...services.health import HealthProber

router = APIRouter()


@router.get("/status")
async def service_status(prober: HealthProber = Depends(get_health_prober)):
    """Estado do serviço de transcrição"""
    status = await prober.service_status()
    return JSONResponse(
        status_code=200 if status.status == "ok" else 503,
        content=status.model_dump(exclude_none=True)
    )
