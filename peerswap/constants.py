"""
PeerSwap Constants

This module consolidates all global constants and environment configuration
used throughout the codebase. Constants are organized by category for easy
reference and maintenance.
"""
import ast
from dotenv import dotenv_values

# =============================================================================
# ENVIRONMENT CONFIGURATION
# =============================================================================
# Load environment variables once at module import
_config = dotenv_values(".env")

ENGINE_DEFAULTS = {
    'PEERSWAP_DATABASE_PATH':          './data/peerswap.db',
    'PEERSWAP_DOMAIN_NAME':            'PeerSwap',
    'PEERSWAP_DOMAIN_VERSION':         '1',
}

LOGGER_DEFAULTS = {
    'LOG_LEVEL':                       'INFO',
    'LOG_FORMAT':                      '%(asctime)s - %(levelname)s - %(name)s - %(message)s',
    'LOG_DATE_FORMAT':                 '%Y-%m-%dT%H:%M:%S',
    'LOG_CONSOLE_HIGHLIGHTING':        'True',
    'LOG_TO_FILE':                     'False',
}

LOG_MAX_FILE_SIZE = 10 * 1024 * 1024 # 10MB
LOG_BACKUP_COUNT = 5


# WARNING: THE VALUES BELOW ARE PART OF THE SIGNED ORDER FORMAT. CHANGING ANY OF THEM CHANGES
# EVERY ORDER HASH, SO ORDERS SIGNED AGAINST ONE BUILD WILL NO LONGER VALIDATE AGAINST ANOTHER.

# ==================================================================================
# NUMERIC LIMITS
# ==================================================================================
UINT256_MAX = 2 ** 256 - 1

# secp256k1 group order; signatures with s above half of it are malleable
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_N = SECP256K1_N // 2


# ==================================================================================
# ADDRESSES
# ==================================================================================
ZERO_ADDRESS = '0x0000000000000000000000000000000000000000'

# Placeholder token address standing for the chain's native currency
NATIVE_CURRENCY = '0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE'


# ==================================================================================
# TYPED-DATA (EIP-712) LAYOUT
# ==================================================================================
EIP712_DOMAIN_TYPE = (
    'EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)'
)
ASSET_TYPE = 'Asset(address token,uint256 amountOrId)'
FEE_TYPE = 'Fee(address recipient,uint256 amount)'
# Referenced struct types are appended in alphabetical order
ORDER_TYPE = (
    'Order(address seller,uint8 orderType,Asset ask,Asset sell,Fee[] fees,'
    'uint256 expiration,uint256 salt)'
    + ASSET_TYPE
    + FEE_TYPE
)

EIP712_PREFIX = b'\x19\x01'
PERSONAL_MESSAGE_PREFIX = b'\x19Ethereum Signed Message:\n32'


# ==================================================================================
# SIGNATURES
# ==================================================================================
# bytes4(keccak256("isValidSignature(bytes32,bytes)"))
WALLET_MAGIC_VALUE = bytes.fromhex('1626ba7e')

ECDSA_SIGNATURE_LENGTH = 65           # r(32) + s(32) + v(1)
SIGNATURE_TYPE_LENGTH = 1             # trailing scheme discriminant
MIN_SIGNATURE_LENGTH = SIGNATURE_TYPE_LENGTH


# ==================================================================================
# CONFIGURATION WRAPPERS
# ==================================================================================
class ConfigString(str):
    """
    String subclass that stores a default value.
    """
    def __new__(cls, value, default):
        obj = str.__new__(cls, value)
        obj._default = default
        return obj

    def default(self):
        return self._default

class ConfigBool(int):
    """
    Int subclass acting as a boolean that stores a default value.
    """
    def __new__(cls, value, default):
        obj = int.__new__(cls, bool(value))
        obj._default = default
        return obj

    def default(self):
        return self._default

    def __repr__(self):
        return str(bool(self))

    def __str__(self):
        return str(bool(self))

    def __eq__(self, other):
        return bool(self) == other

    __hash__ = int.__hash__


# ==================================================================================
# DYNAMIC CONFIGURATION LOADING
# ==================================================================================
DEFAULTS = ENGINE_DEFAULTS | LOGGER_DEFAULTS
namespace = globals()

def parse_bool(v):
    """
    Convert "True"/"False" (any casing, with surrounding whitespace) into bool.
    Avoids exceptions by only calling ast.literal_eval for known literals.
    """
    if not isinstance(v, str):
        return v
    s = v.strip()
    if not s:
        return v
    if s.casefold() in {"true", "false"}:
        # ast.literal_eval expects "True"/"False"
        return ast.literal_eval(s.title())
    return v

for key, default_raw in DEFAULTS.items():
    # dotenv_values returns strings or None. None is treated as missing.
    raw = _config.get(key)
    value_raw = default_raw if raw is None else raw

    value = parse_bool(value_raw)
    default_val = parse_bool(default_raw)

    if isinstance(value, bool):
        namespace[key] = ConfigBool(value, default_val)
    else:
        namespace[key] = ConfigString(value_raw, default_val)
