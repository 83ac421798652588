# Simulation Configuration

# Unit System
TICK_RATE_HZ = 60                 # Ticks per real second
TIME_SCALE = 15.0                 # Simulated time runs 15x faster than real time
FEET_PER_MILE = 5280.0
SECONDS_PER_HOUR = 3600.0

# Road Geometry (simulation distance units)
SCENE_WIDTH = 1000.0
ROAD_MARGIN = 150.0               # Scene edge to outer light
ROAD_LENGTH = SCENE_WIDTH - 2 * ROAD_MARGIN
ROAD_LENGTH_FEET = 15840.0        # 3 miles between the outer lights
UNITS_PER_FOOT = ROAD_LENGTH / ROAD_LENGTH_FEET
ROAD_ORIGIN = ROAD_MARGIN         # Forward origin for green-wave arrival times

LEFT_LIGHT_POSITION = ROAD_MARGIN
RIGHT_LIGHT_POSITION = SCENE_WIDTH - ROAD_MARGIN
LIGHT_IDS = ("left", "middle", "right")
MIDDLE_LIGHT_INDEX = 1

# Signal Timings
GREEN_FRACTION = 0.45
YELLOW_FRACTION = 0.10            # Red takes the remaining 45%
STOP_LINE_OFFSET = 25.0           # Distance from light to stop line

# Vehicles
VEHICLE_LENGTH_FEET = 15.0
MIN_VEHICLE_LENGTH = 32.0         # Display/safety floor
FOLLOWING_BUFFER_RATIO = 0.2
LANE_OFFSET = 40.0                # Lateral offset from road centre
LANE_TOLERANCE = 20.0             # Same-lane grouping tolerance
SPAWN_MARGIN = 50.0               # Spawn point outside each scene edge
RETIRE_MARGIN = 100.0             # Retire point outside each scene edge
SPAWN_INTERVAL_SECONDS = 3
SPAWN_INTERVAL_TICKS = SPAWN_INTERVAL_SECONDS * TICK_RATE_HZ

# Defaults for the live configuration
DEFAULT_SPEED_LIMIT = 60.0        # mph
DEFAULT_MIDDLE_LIGHT_PERCENT = 35.0
DEFAULT_CYCLE_TIME = 30.0         # simulated seconds
DEFAULT_LIGHT_OFFSETS = (0.0, 6.0, 12.0)
DEFAULT_LIGHT_CYCLE_TIMES = (DEFAULT_CYCLE_TIME, DEFAULT_CYCLE_TIME, DEFAULT_CYCLE_TIME)
