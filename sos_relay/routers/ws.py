"""WebSocket router: /ws/reports."""
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

router = APIRouter(tags=["ws"])


@router.websocket("/ws/reports")
async def ws_reports(websocket: WebSocket):
    """Dashboard WS: send the hello, then subscribe and stream reports_changed signals."""
    registry = websocket.app.state.intake.fanout
    await websocket.accept()
    # Hello goes out before the socket is visible to notify(), so it is always first.
    await websocket.send_json({"type": "connected"})
    await registry.subscribe(websocket)
    try:
        while True:
            try:
                _ = await websocket.receive_text()
            except WebSocketDisconnect:
                break
    finally:
        await registry.unsubscribe(websocket)
