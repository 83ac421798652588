from enum import Enum
from typing import Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, conint, field_validator
from greenwave.domain import config

class SignalState(str, Enum):
    RED = "RED"
    YELLOW = "YELLOW"
    GREEN = "GREEN"

class Direction(str, Enum):
    FORWARD = "forward" # eastbound, increasing position
    REVERSE = "reverse" # westbound, decreasing position

    @property
    def sign(self) -> int:
        return 1 if self is Direction.FORWARD else -1

LightKey = Literal["left", "middle", "right"]
LightIndex = conint(ge=0, le=len(config.LIGHT_IDS) - 1)

class TrafficLight(BaseModel):
    id: str  # "left", "middle" or "right"
    index: int
    position: float
    phase: SignalState = SignalState.GREEN
    cycle_time: float = config.DEFAULT_CYCLE_TIME
    offset: float = 0.0
    optimal_arrival: float = 0.0 # Forward travel time from the road origin, sim seconds
    arrival_phase: SignalState = SignalState.GREEN
    movable: bool = False

    def stop_line(self, direction: Direction) -> float:
        return self.position - direction.sign * config.STOP_LINE_OFFSET

class Vehicle(BaseModel):
    id: str
    position: float
    lane_offset: float
    speed: float # Magnitude, units per tick
    direction: Direction = Field(frozen=True)
    hit_red_light: bool = False
    red_light_stops: int = 0
    spawned_at: int = 0

# Configuration Models

class SimulationConfig(BaseModel):
    speed_limit: float = Field(config.DEFAULT_SPEED_LIMIT, gt=0)
    middle_light_position_percent: float = Field(config.DEFAULT_MIDDLE_LIGHT_PERCENT, ge=0, le=100)
    light_offsets: List[float] = Field(
        default_factory=lambda: list(config.DEFAULT_LIGHT_OFFSETS), min_length=3, max_length=3
    )
    light_cycle_times: List[PositiveFloat] = Field(
        default_factory=lambda: list(config.DEFAULT_LIGHT_CYCLE_TIMES), min_length=3, max_length=3
    )

class ConfigUpdate(BaseModel):
    """Partial configuration change produced by the control surface."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    speed_limit: Optional[float] = Field(None, gt=0, alias="speedLimit")
    middle_light_position_percent: Optional[float] = Field(
        None, ge=0, le=100, alias="middleLightPositionPercent"
    )
    # Lights are keyed by id or by index; indices are stored as ids
    light_offsets: Optional[Dict[Union[LightKey, LightIndex], float]] = Field(None, alias="lightOffset")
    light_cycle_times: Optional[Dict[Union[LightKey, LightIndex], PositiveFloat]] = Field(
        None, alias="lightCycleDuration"
    )

    @field_validator("light_offsets", "light_cycle_times")
    @classmethod
    def key_by_light_id(cls, value):
        if value is None:
            return value
        return {config.LIGHT_IDS[k] if isinstance(k, int) else k: v for k, v in value.items()}

# Statistics

class DirectionStats(BaseModel):
    spawned: int = 0
    retired: int = 0
    retired_after_red: int = 0
    red_light_stops: int = 0 # Ticks spent blocked by a red signal

class RunStatistics(BaseModel):
    forward: DirectionStats = Field(default_factory=DirectionStats)
    reverse: DirectionStats = Field(default_factory=DirectionStats)

    def for_direction(self, direction: Direction) -> DirectionStats:
        return self.forward if direction is Direction.FORWARD else self.reverse

# API/Render Models

class LightSnapshot(BaseModel):
    id: str
    position: float
    phase: SignalState
    forward_stop_line: float
    reverse_stop_line: float
    cycle_time: float
    offset: float
    optimal_arrival: float
    arrival_phase: SignalState # What a green-wave vehicle from the origin sees on arrival

class VehicleSnapshot(BaseModel):
    id: str
    position: float
    lane_offset: float
    direction: Direction
    hit_red_light: bool

class SceneSnapshot(BaseModel):
    tick: int
    time: float
    running: bool
    config: SimulationConfig
    lights: List[LightSnapshot]
    vehicles: List[VehicleSnapshot]
    stats: RunStatistics

class CommandAck(BaseModel):
    status: str
    pending: int
