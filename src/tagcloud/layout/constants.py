"""Layout defaults and fixed thresholds."""

# Surface
WIDTH = 500
HEIGHT = 500

# Down-sample ratio: one grid cell covers CELL_SIZE x CELL_SIZE device px
CELL_SIZE = 4

# Packed row word width (bits)
WORD_BITS = 32
WORD_MASK = (1 << WORD_BITS) - 1

# Silhouette ink thresholds (configurable)
OPACITY_THRESHOLD = 255
LUMINANCE_THRESHOLD = (255 * 3) // 2
MAX_LUMINANCE = 255 * 3

# Glyph and custom-shape ink: any visible paint counts
GLYPH_OPACITY_THRESHOLD = 2
GLYPH_LUMINANCE_THRESHOLD = MAX_LUMINANCE
SHAPE_OPACITY_THRESHOLD = 2
SHAPE_LUMINANCE_THRESHOLD = MAX_LUMINANCE

# Font sizing (px)
MIN_FONT_SIZE = 10
MAX_FONT_SIZE = 100

# Rotation (degrees, counter-clockwise)
ANGLE_FROM = -60
ANGLE_TO = 60
ANGLE_COUNT = 3

FONT_FAMILY = "sans-serif"
BOUNDARY_POLICY = "cut"

# Total stroke width added around each glyph (px)
PADDING = 10
