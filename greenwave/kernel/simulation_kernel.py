import logging
from collections import deque
from typing import Deque, List, Optional
from greenwave.domain.models import (
    ConfigUpdate, Direction, RunStatistics, SceneSnapshot, SimulationConfig, TrafficLight, Vehicle
)
from greenwave.domain.state import SimulationState
from greenwave.domain import config, units
from greenwave.kernel.commands import Command
from greenwave.kernel.snapshot_builder import SnapshotBuilder
from greenwave.systems.signal_system import SignalSystem
from greenwave.systems.vehicle_system import VehicleSystem

log = logging.getLogger(__name__)

class SimulationKernel:
    """Owns the simulation state and runs one tick per call.

    The kernel never schedules itself: an external driver calls
    :meth:`run_tick` at ``config.TICK_RATE_HZ``. Control-surface changes are
    queued as commands and applied between ticks.
    """

    def __init__(self, sim_config: Optional[SimulationConfig] = None):
        self.state = SimulationState()
        self.command_queue: Deque[Command] = deque()
        self.signal_system = SignalSystem()
        self.vehicle_system = VehicleSystem()
        self.snapshot_builder = SnapshotBuilder()
        self.initialize(sim_config)

    @property
    def running(self) -> bool:
        return self.state.running

    def initialize(self, sim_config: Optional[SimulationConfig] = None):
        if sim_config is not None:
            self.state.config = sim_config.model_copy(deep=True)
        self.state.tick_id = 0
        self.state.time = 0.0
        self.state.vehicles = []
        self.state.last_spawn_tick = 0
        self.state.pending_spawns = []
        self.state.next_vehicle_id = 1
        self.state.stats = RunStatistics()
        self._initialize_lights()
        log.info(
            "Simulation initialized: speed=%.0f mph, middle light at %.0f%%, offsets=%s, cycles=%s",
            self.state.config.speed_limit,
            self.state.config.middle_light_position_percent,
            self.state.config.light_offsets,
            self.state.config.light_cycle_times,
        )

    def _initialize_lights(self):
        cfg = self.state.config
        positions = (
            config.LEFT_LIGHT_POSITION,
            units.middle_light_position(cfg.middle_light_position_percent),
            config.RIGHT_LIGHT_POSITION,
        )
        self.state.lights = [
            TrafficLight(
                id=light_id,
                index=i,
                position=positions[i],
                cycle_time=cfg.light_cycle_times[i],
                offset=cfg.light_offsets[i],
                movable=(i == config.MIDDLE_LIGHT_INDEX)
            )
            for i, light_id in enumerate(config.LIGHT_IDS)
        ]
        self._update_signals()

    # Commands

    def queue_command(self, command: Command):
        self.command_queue.append(command)

    def apply_pending(self) -> int:
        applied = 0
        while self.command_queue:
            cmd = self.command_queue.popleft()
            cmd.execute(self)
            applied += 1
        return applied

    # Lifecycle

    def start(self):
        if self.state.running:
            return
        self.state.running = True
        self._schedule_spawn()
        self._release_spawns()
        log.info("Simulation started at tick %d", self.state.tick_id)

    def pause(self):
        self.state.running = False
        log.info("Simulation paused at tick %d", self.state.tick_id)

    def reset(self):
        self.pause()
        self.initialize()

    # Tick

    def run_tick(self):
        # 1. Consume Commands
        self.apply_pending()

        # 2. Advance Time
        self.state.tick_id += 1
        self.state.time = units.ticks_to_sim_seconds(self.state.tick_id)

        # 3. Spawning
        if self.state.tick_id - self.state.last_spawn_tick >= config.SPAWN_INTERVAL_TICKS:
            self._schedule_spawn()
        self._release_spawns()

        # 4. Signals, then vehicles against the refreshed phases
        self._update_signals()
        self.vehicle_system.advance(self.state.vehicles, self.state.lights)

        # 5. Retire
        self._retire_vehicles()

    def tick(self):
        self.run_tick()

    def _update_signals(self):
        self.signal_system.update(self.state.lights, self.state.tick_id, self.state.config.speed_limit)

    def _schedule_spawn(self):
        # At most one owed vehicle per direction; a blocked entry does not pile up spawns
        for direction in (Direction.FORWARD, Direction.REVERSE):
            if direction not in self.state.pending_spawns:
                self.state.pending_spawns.append(direction)
        self.state.last_spawn_tick = self.state.tick_id

    def _release_spawns(self):
        if not self.state.pending_spawns:
            return
        speed = units.mph_to_units_per_tick(self.state.config.speed_limit)
        waiting: List[Direction] = []
        for direction in self.state.pending_spawns:
            position = self._spawn_position(direction)
            if self._entry_clear(direction, position):
                self.state.vehicles.append(self._new_vehicle(direction, position, speed))
            else:
                log.debug("Spawn of %s vehicle held back at tick %d", direction.value, self.state.tick_id)
                waiting.append(direction)
        self.state.pending_spawns = waiting

    def _spawn_position(self, direction: Direction) -> float:
        if direction is Direction.FORWARD:
            return -config.SPAWN_MARGIN
        return config.SCENE_WIDTH + config.SPAWN_MARGIN

    def _lane_offset(self, direction: Direction) -> float:
        return -config.LANE_OFFSET if direction is Direction.FORWARD else config.LANE_OFFSET

    def _entry_clear(self, direction: Direction, position: float) -> bool:
        """True when every vehicle in the entry lane is a following distance past ``position``."""
        lane_offset = self._lane_offset(direction)
        for v in self.state.vehicles:
            if v.direction != direction or abs(v.lane_offset - lane_offset) >= config.LANE_TOLERANCE:
                continue
            if direction.sign * (v.position - position) < self.vehicle_system.following_distance:
                return False
        return True

    def _new_vehicle(self, direction: Direction, position: float, speed: float) -> Vehicle:
        prefix = "F" if direction is Direction.FORWARD else "R"
        vehicle = Vehicle(
            id=f"{prefix}-{self.state.next_vehicle_id:04d}",
            position=position,
            lane_offset=self._lane_offset(direction),
            speed=speed,
            direction=direction,
            spawned_at=self.state.tick_id
        )
        self.state.next_vehicle_id += 1
        self.state.stats.for_direction(direction).spawned += 1
        log.debug("Spawned %s at %.1f (tick %d)", vehicle.id, position, self.state.tick_id)
        return vehicle

    def _is_off_track(self, v: Vehicle) -> bool:
        if v.direction is Direction.FORWARD:
            return v.position > config.SCENE_WIDTH + config.RETIRE_MARGIN
        return v.position < -config.RETIRE_MARGIN

    def _retire_vehicles(self):
        remaining: List[Vehicle] = []
        for v in self.state.vehicles:
            if not self._is_off_track(v):
                remaining.append(v)
                continue
            stats = self.state.stats.for_direction(v.direction)
            stats.retired += 1
            stats.red_light_stops += v.red_light_stops
            if v.hit_red_light:
                stats.retired_after_red += 1
            log.debug(
                "Retired %s after %d ticks (hit red: %s)",
                v.id, self.state.tick_id - v.spawned_at, v.hit_red_light
            )
        self.state.vehicles = remaining

    # Configuration

    def update_config(self, updates: ConfigUpdate) -> SimulationConfig:
        cfg = self.state.config
        lights = self.state.lights

        if updates.speed_limit is not None:
            cfg.speed_limit = updates.speed_limit
            speed = units.mph_to_units_per_tick(cfg.speed_limit)
            for v in self.state.vehicles:
                v.speed = speed

        if updates.middle_light_position_percent is not None:
            cfg.middle_light_position_percent = updates.middle_light_position_percent
            lights[config.MIDDLE_LIGHT_INDEX].position = units.middle_light_position(
                cfg.middle_light_position_percent
            )

        if updates.light_offsets:
            for light_id, offset in updates.light_offsets.items():
                idx = config.LIGHT_IDS.index(light_id)
                cfg.light_offsets[idx] = offset
                lights[idx].offset = offset

        if updates.light_cycle_times:
            for light_id, cycle_time in updates.light_cycle_times.items():
                idx = config.LIGHT_IDS.index(light_id)
                cfg.light_cycle_times[idx] = cycle_time
                lights[idx].cycle_time = cycle_time

        log.info("Configuration updated: %s", updates.model_dump(exclude_none=True))
        return cfg

    # Read Models

    def get_state(self) -> SceneSnapshot:
        return self.snapshot_builder.build(self.state)

    def get_config(self) -> SimulationConfig:
        return self.state.config.model_copy(deep=True)

    def get_stats(self) -> RunStatistics:
        return self.state.stats.model_copy(deep=True)
