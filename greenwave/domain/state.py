from typing import List
from pydantic import BaseModel, Field
from greenwave.domain.models import Direction, RunStatistics, SimulationConfig, TrafficLight, Vehicle

class SimulationState(BaseModel):
    tick_id: int = 0
    time: float = 0.0
    lights: List[TrafficLight] = []
    vehicles: List[Vehicle] = []
    last_spawn_tick: int = 0
    pending_spawns: List[Direction] = [] # Owed a vehicle, waiting for a clear entry
    next_vehicle_id: int = 1
    running: bool = False
    stats: RunStatistics = Field(default_factory=RunStatistics)
    config: SimulationConfig = Field(default_factory=SimulationConfig)
