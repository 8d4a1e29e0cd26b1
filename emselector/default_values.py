# Memcached keys are limited to 250 bytes, a bigger buffer fits any
# valid key without growing.
DEFAULT_BUFFER_SIZE = 256

DEFAULT_MAX_BUFFERS = 64

# Buffers grown over this size by long keys are not kept by the pool.
DEFAULT_MAX_BUFFER_SIZE = 64 * 1024

# No limit, keys are always hashed in full.
DEFAULT_MAX_KEY_LENGTH = None
