from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.websocket("/ws/transcriptions")
async def transcriptions_socket(websocket: WebSocket):
    """Envia um snapshot completo do job a cada mudança de estado"""
    notifier = websocket.app.state.notifier

    # Registrar antes do accept: quando o cliente vê a conexão aberta já está na lista
    await notifier.register(websocket)
    await websocket.accept()
    try:
        while True:
            message = await websocket.receive_text()
            logger.debug(f"Mensagem de observador ignorada: {message}")
    except WebSocketDisconnect as e:
        if e.code not in (1000, 1001):
            logger.debug(f"Observador desconectou com código {e.code}")
    finally:
        await notifier.unregister(websocket)
