from typing import List, Tuple
from greenwave.domain.models import TrafficLight, SignalState
from greenwave.domain import config, units

def phase_windows(cycle_time: float) -> Tuple[float, float]:
    """Return the (green_end, yellow_end) boundaries of one cycle.

    GREEN covers [0, green_end), YELLOW [green_end, yellow_end) and RED
    the rest of the cycle.
    """
    green_end = cycle_time * config.GREEN_FRACTION
    return green_end, green_end + cycle_time * config.YELLOW_FRACTION

def optimal_arrival_time(position: float, speed_limit: float) -> float:
    """Simulated seconds a forward vehicle at the speed limit needs to reach
    ``position`` from the road origin. Negative behind the origin."""
    return units.travel_time_sim_seconds(position - config.ROAD_ORIGIN, speed_limit)

def phase_at(sim_seconds: float, offset: float, cycle_time: float) -> SignalState:
    effective = (sim_seconds - offset + cycle_time) % cycle_time
    green_end, yellow_end = phase_windows(cycle_time)
    if effective < green_end:
        return SignalState.GREEN
    elif effective < yellow_end:
        return SignalState.YELLOW
    return SignalState.RED

def phase_of(light: TrafficLight, clock: int) -> SignalState:
    """Phase of ``light`` at ``clock`` ticks. Never reads ``light.phase``."""
    return phase_at(units.ticks_to_sim_seconds(clock), light.offset, light.cycle_time)

def arrival_phase(light: TrafficLight, speed_limit: float) -> SignalState:
    """Phase seen by a vehicle leaving the origin at clock zero when it reaches the light."""
    return phase_at(optimal_arrival_time(light.position, speed_limit), light.offset, light.cycle_time)

class SignalSystem:
    def update(self, lights: List[TrafficLight], clock: int, speed_limit: float):
        for light in lights:
            light.optimal_arrival = optimal_arrival_time(light.position, speed_limit)
            light.arrival_phase = phase_at(light.optimal_arrival, light.offset, light.cycle_time)
            light.phase = phase_of(light, clock)
