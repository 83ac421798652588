from greenwave.domain.models import Direction, LightSnapshot, SceneSnapshot, VehicleSnapshot
from greenwave.domain.state import SimulationState

class SnapshotBuilder:
    """Builds the read-only view handed to renderers every tick."""

    def build(self, state: SimulationState) -> SceneSnapshot:
        return SceneSnapshot(
            tick=state.tick_id,
            time=state.time,
            running=state.running,
            config=state.config.model_copy(deep=True),
            lights=[
                LightSnapshot(
                    id=light.id,
                    position=light.position,
                    phase=light.phase,
                    forward_stop_line=light.stop_line(Direction.FORWARD),
                    reverse_stop_line=light.stop_line(Direction.REVERSE),
                    cycle_time=light.cycle_time,
                    offset=light.offset,
                    optimal_arrival=light.optimal_arrival,
                    arrival_phase=light.arrival_phase
                )
                for light in state.lights
            ],
            vehicles=[
                VehicleSnapshot(
                    id=v.id,
                    position=v.position,
                    lane_offset=v.lane_offset,
                    direction=v.direction,
                    hit_red_light=v.hit_red_light
                )
                for v in state.vehicles
            ],
            stats=state.stats.model_copy(deep=True)
        )
