"""Conversions between real-world units and simulation units.

Distances are mapped by the road length in units over its length in feet
(``UNITS_PER_FOOT``) and time with ``TIME_SCALE`` and ``TICK_RATE_HZ``.
Nothing else in the package converts units.
"""
from greenwave.domain import config


def feet_to_units(feet: float) -> float:
    return feet * config.ROAD_LENGTH / config.ROAD_LENGTH_FEET


def units_to_feet(units: float) -> float:
    # Multiply before dividing so whole-road fractions convert exactly
    return units * config.ROAD_LENGTH_FEET / config.ROAD_LENGTH


def mph_to_feet_per_second(mph: float) -> float:
    return mph * config.FEET_PER_MILE / config.SECONDS_PER_HOUR


def ticks_to_sim_seconds(ticks: float) -> float:
    return ticks / config.TICK_RATE_HZ


def mph_to_units_per_tick(mph: float) -> float:
    # mph -> ft/s -> units/s -> units per simulated second -> units per tick
    units_per_second = feet_to_units(mph_to_feet_per_second(mph))
    return units_per_second * config.TIME_SCALE / config.TICK_RATE_HZ


def travel_time_sim_seconds(distance_units: float, mph: float) -> float:
    """Simulated seconds needed to cover ``distance_units`` at ``mph``."""
    real_seconds = units_to_feet(distance_units) / mph_to_feet_per_second(mph)
    return real_seconds / config.TIME_SCALE


def vehicle_length() -> float:
    return max(feet_to_units(config.VEHICLE_LENGTH_FEET), config.MIN_VEHICLE_LENGTH)


def following_distance() -> float:
    length = vehicle_length()
    return length + length * config.FOLLOWING_BUFFER_RATIO


def middle_light_position(percent: float) -> float:
    return config.ROAD_MARGIN + config.ROAD_LENGTH * percent / 100.0
