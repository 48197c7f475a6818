"""Fixed constants: time units, distances, tolerances, and body groups."""

# Time
SECONDS_PER_DAY = 86400.0

# Angle
DEGREES_PER_CIRCLE = 360.0
DEGREES_PER_HOUR_RA = 15.0  # right ascension: 360° / 24 h

# Distance
KM_PER_AU = 1.4959787069098932e8

# Queries closer than this to a reference epoch return the stored state unchanged.
SHORT_CIRCUIT_DAYS = 1.0

# Central-difference half step for velocity estimates: one second.
FINITE_DIFF_DAYS = 1.0 / SECONDS_PER_DAY

# Bodies with heliocentric apsides, by astronomy.Body name.
PLANETS = (
    'Mercury',
    'Venus',
    'Earth',
    'Mars',
    'Jupiter',
    'Saturn',
    'Uranus',
    'Neptune',
    'Pluto',
)

# Bodies that can transit the Sun as seen from Earth.
TRANSIT_BODIES = ('Mercury', 'Venus')
