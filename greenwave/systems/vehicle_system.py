import logging
from typing import List
from greenwave.domain.models import SignalState, TrafficLight, Vehicle
from greenwave.domain import config, units

log = logging.getLogger(__name__)

class VehicleSystem:
    """Moves vehicles one tick at a time under car-following and signal rules.

    Every decision within a tick is made against the pre-tick positions of
    all vehicles and the phases already refreshed on ``lights``. Positions
    are committed only after every vehicle has been decided.
    """

    def __init__(self):
        self.vehicle_length = units.vehicle_length()
        self.following_distance = units.following_distance()

    def advance(self, vehicles: List[Vehicle], lights: List[TrafficLight], ticks_elapsed: int = 1) -> List[Vehicle]:
        for _ in range(ticks_elapsed):
            next_positions = [self._next_position(v, vehicles, lights) for v in vehicles]
            for v, position in zip(vehicles, next_positions):
                v.position = position
        return vehicles

    def front(self, vehicle: Vehicle, position: float) -> float:
        return position + vehicle.direction.sign * self.vehicle_length / 2

    def _next_position(self, v: Vehicle, vehicles: List[Vehicle], lights: List[TrafficLight]) -> float:
        candidate = v.position + v.speed * v.direction.sign

        if self._blocked_by_vehicle_ahead(v, candidate, vehicles):
            return v.position
        if self._blocked_by_signal(v, candidate, lights):
            return v.position
        return candidate

    def _blocked_by_vehicle_ahead(self, v: Vehicle, candidate: float, vehicles: List[Vehicle]) -> bool:
        sign = v.direction.sign
        for other in vehicles:
            if other is v or other.direction != v.direction:
                continue
            if abs(other.lane_offset - v.lane_offset) >= config.LANE_TOLERANCE:
                continue
            # Only vehicles strictly ahead along the direction of travel
            if sign * (other.position - v.position) <= 0:
                continue
            if sign * (other.position - candidate) < self.following_distance:
                return True
        return False

    def _blocked_by_signal(self, v: Vehicle, candidate: float, lights: List[TrafficLight]) -> bool:
        sign = v.direction.sign
        front = self.front(v, v.position)
        next_front = self.front(v, candidate)

        for light in lights:
            stop_line = light.stop_line(v.direction)
            # Signed distance left to the stop line: positive means still before it
            remaining = sign * (stop_line - front)
            remaining_after = sign * (stop_line - next_front)

            if remaining > 0 and remaining_after <= 0:
                # Crossing this tick; yellow and green let it through
                if light.phase == SignalState.RED:
                    self._mark_red_stop(v, light)
                    return True
            elif 0 <= remaining <= self.following_distance and light.phase == SignalState.RED:
                self._mark_red_stop(v, light)
                return True
        return False

    def _mark_red_stop(self, v: Vehicle, light: TrafficLight):
        if not v.hit_red_light:
            log.debug("Vehicle %s (%s) stopped by RED at %s light", v.id, v.direction.value, light.id)
        v.hit_red_light = True
        v.red_light_stops += 1
