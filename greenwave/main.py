import asyncio
import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from greenwave.domain import config
from greenwave.domain.models import (
    CommandAck, ConfigUpdate, RunStatistics, SceneSnapshot, SimulationConfig
)
from greenwave.kernel.commands import (
    PauseCommand, ResetCommand, StartCommand, UpdateConfigCommand
)
from greenwave.kernel.simulation_kernel import SimulationKernel
from greenwave.logging_setup import setup_logging
from greenwave.settings import get_settings

log = logging.getLogger(__name__)
settings = get_settings()

# Initialize Kernel
kernel = SimulationKernel()

# Background task for simulation loop
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Start the driver loop
    if settings.AUTO_START:
        kernel.start()
    loop_task = asyncio.create_task(run_simulation())
    yield
    # Shutdown
    loop_task.cancel()

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

async def run_simulation():
    """Drives the kernel at the target tick rate.

    Queued commands are applied every frame so control changes land while
    paused too. Ticks only run while the kernel is marked running.
    """
    dt = 1.0 / config.TICK_RATE_HZ

    while True:
        start_time = time.time()

        kernel.apply_pending()
        if kernel.running:
            kernel.run_tick()

        # Sleep to maintain frame rate
        elapsed = time.time() - start_time
        await asyncio.sleep(max(0.0, dt - elapsed))

def _ack(status: str) -> CommandAck:
    return CommandAck(status=status, pending=len(kernel.command_queue))

@app.get("/api/scene", response_model=SceneSnapshot)
async def get_scene():
    """Returns the render-facing snapshot of lights and vehicles"""
    return kernel.get_state()

@app.get("/api/config", response_model=SimulationConfig)
async def get_config():
    """Returns the live simulation configuration"""
    return kernel.get_config()

@app.post("/api/config", response_model=CommandAck)
async def update_config(updates: ConfigUpdate):
    """Queues a partial configuration change for the next frame"""
    kernel.queue_command(UpdateConfigCommand(updates))
    return _ack("queued")

@app.post("/api/simulation/start", response_model=CommandAck)
async def start_simulation():
    kernel.queue_command(StartCommand())
    return _ack("start queued")

@app.post("/api/simulation/pause", response_model=CommandAck)
async def pause_simulation():
    kernel.queue_command(PauseCommand())
    return _ack("pause queued")

@app.post("/api/simulation/reset", response_model=CommandAck)
async def reset_simulation():
    kernel.queue_command(ResetCommand())
    return _ack("reset queued")

@app.get("/api/stats", response_model=RunStatistics)
async def get_stats():
    """Returns per-direction outcome data for retired vehicles"""
    return kernel.get_stats()

@app.get("/")
def read_root():
    return {"status": "Green Wave Simulation Running", "tick": kernel.state.tick_id, "running": kernel.running}

def run():
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    log.info("Serving %s on %s:%d", settings.APP_NAME, settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)

if __name__ == "__main__":
    run()
