"""Pool engine constants.

Centralizes the swap fee and the fixed-point scale used for price queries.
"""

# Swap fee: 997/1000 of the input is priced, the remaining 0.3% stays in the pool
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

# Price scaling factor (1e18), matching ERC20 token decimals
PRICE_SCALE = 10**18

# Token amounts and reserves must fit in a uint256
UINT256_MAX = 2**256 - 1

# Allowance value treated as infinite by the token ledger
MAX_ALLOWANCE = UINT256_MAX
