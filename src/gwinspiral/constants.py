"""
Physical and astronomical constants used throughout the inspiral module.

CGS UNITS:
- Distance: centimetres (cm)
- Mass: grams (g)
- Time: seconds (s)

Code units are set by a distance and mass unit with G = 1, so that
unit_time = sqrt(udist³ / (G × umass)) and unit_velocity = udist / unit_time.
"""

# Speed of light [cm/s]
c = 2.997924580e10

# Gravitational constant [cm³/(g·s²)]
G = 6.672041e-8

# Solar mass [g]
solarm = 1.9891e33

# Convenient length scales [cm]
km = 1.0e5
solarr = 6.959500e10

# Default runtime parameter: ratio of particles crossing the CoM to indicate a merger
default_stop_ratio = 0.005
