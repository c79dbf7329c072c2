"""
Layout, capacity and timing constants for the nucleus builder.
"""

# Nucleon geometry in view units
PARTICLE_RADIUS = 10.0
PARTICLE_DIAMETER = PARTICLE_RADIUS * 2

# Energy levels, per species. Row is the level, number is the column on it.
ALLOWED_PARTICLE_POSITIONS = (
    (2, 3),
    (0, 1, 2, 3, 4, 5),
    (0, 1, 2, 3, 4, 5),
)
LEVEL_CAPACITIES = tuple(len(row) for row in ALLOWED_PARTICLE_POSITIONS)  # (2, 6, 6)
NUMBER_OF_ENERGY_LEVELS = len(ALLOWED_PARTICLE_POSITIONS)
TOTAL_SHELL_CAPACITY = sum(LEVEL_CAPACITIES)

# Spacing between columns and between levels
PARTICLE_X_SPACING = PARTICLE_DIAMETER + PARTICLE_RADIUS
PARTICLE_Y_SPACING = PARTICLE_DIAMETER * 5

# Neutron levels are drawn to the right of the proton levels
X_DISTANCE_BETWEEN_ENERGY_LEVELS = 180.0

# Where the bottom-left proton column sits in view coordinates
SHELL_ORIGIN = (150.0, 420.0)

# Nucleons dropped within this distance of the nucleus are captured
NUCLEON_CAPTURE_RADIUS = 100.0

# Where new nucleons come from and where removed ones go back to
PROTON_CREATOR_POSITION = (120.0, 560.0)
NEUTRON_CREATOR_POSITION = (420.0, 560.0)

# Emitted particles travel this far from the nucleus, well outside the view
ESCAPE_DISTANCE = 1500.0

# Animation speeds in view units per second
PARTICLE_ANIMATION_SPEED = 300.0
EMITTED_PARTICLE_SPEED = {
    "alpha": 250.0,
    "electron": 450.0,
    "positron": 450.0,
    "nucleon": 350.0,
}

# Seconds a nuclide that does not exist stays on screen before it is corrected
DOES_NOT_EXIST_GRACE_PERIOD = 1.0

# Largest counts the nucleus builder allows (Neon-22)
MAX_PROTONS = 10
MAX_NEUTRONS = 12

# Half-life number line goes from 10^-24 s to 10^24 s; stable nuclides sit at the end
HALF_LIFE_NUMBER_LINE_START_EXPONENT = -24
HALF_LIFE_NUMBER_LINE_END_EXPONENT = 24

# Time conversion
MINUTE = 60.0
HOUR = 3600.0
DAY = 86400.0
YEAR = 365 * DAY
