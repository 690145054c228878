"""Websocket endpoint streaming the admin order board.

Each connection owns one OrderBoard. Feed callbacks run on whichever thread
published the change, so they only enqueue; the connection's pump task is
the single consumer that reconciles snapshots and writes to the socket.
"""

import asyncio

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ordering.board.board import OrderBoard
from ordering.domain import ordering

logger = structlog.get_logger(__name__)

live_router = APIRouter(prefix="/orders", tags=["orders"])

FEED_ERROR_MESSAGE = "Lost connection to live orders"


async def _pump(websocket: WebSocket, board: OrderBoard, queue: asyncio.Queue) -> None:
    while True:
        kind, payload = await queue.get()
        if kind == "error":
            board.on_feed_error(payload)
            await websocket.send_json({"type": "error", "message": FEED_ERROR_MESSAGE})
            await websocket.close(code=1011)
            return

        new_orders = board.reconcile(payload)
        await websocket.send_json(
            {
                "type": "snapshot",
                "orders": board.orders(),
                "pending_count": board.pending_count,
                "new_orders": new_orders,
            }
        )


@live_router.websocket("/live")
async def live_orders(websocket: WebSocket) -> None:
    await websocket.accept()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def forward(kind):
        def callback(payload):
            loop.call_soon_threadsafe(queue.put_nowait, (kind, payload))

        return callback

    board = OrderBoard()
    with ordering.domain_context():
        board.start(on_update=forward("snapshot"), on_error=forward("error"))
    logger.info("Admin board connected")

    pump = asyncio.create_task(_pump(websocket, board, queue))
    try:
        while not pump.done():
            receive = asyncio.create_task(websocket.receive_text())
            done, _ = await asyncio.wait({receive, pump}, return_when=asyncio.FIRST_COMPLETED)
            if receive not in done:
                receive.cancel()
                break
            # Client messages carry nothing; receiving only detects disconnects
            receive.result()
    except WebSocketDisconnect:
        logger.info("Admin board disconnected")
    finally:
        board.stop()
        pump.cancel()
