"""Omni Layer payload configuration constants.

Keep this file aligned with the published Omni Layer specification and the
constants in Omni Core `src/omnicore/omnicore.h`.
"""

# Units
COIN_DECIMALS = 8
COIN_VALUE = 10**COIN_DECIMALS

# Integer field bounds
UINT8_MAX = 0xFF
UINT16_MAX = 0xFFFF
UINT32_MAX = 0xFFFFFFFF
UINT64_MAX = 0xFFFFFFFFFFFFFFFF
INT8_MIN = -0x80
INT8_MAX = 0x7F

# Strings (bytes, excluding the NUL terminator)
MAX_STRING_LENGTH = 255

# Header
VERSION_FIELD_SIZE = 2
TYPE_FIELD_SIZE = 2
HEADER_SIZE = VERSION_FIELD_SIZE + TYPE_FIELD_SIZE

# Property identifiers
OMNI_PROPERTY_BTC = 0
OMNI_PROPERTY_MSC = 1
OMNI_PROPERTY_TMSC = 2
TEST_ECO_PROPERTY_1 = 0x80000003
MAX_PROPERTY_ID = UINT32_MAX

# Crowdsale bonuses are signed byte percentages on the wire.
MAX_BONUS_PERCENT = INT8_MAX

# DEx payment window (blocks)
MIN_PAYMENT_WINDOW = 1
MAX_PAYMENT_WINDOW = UINT8_MAX
