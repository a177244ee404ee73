"""Minimal contract ABIs for the Morpho-AaveV3 adapters."""

from defi_adapters.data.sources.erc20 import ERC20_ABI


def _uint(name: str, bits: int = 256) -> dict:
    return {"name": name, "type": f"uint{bits}"}


def _address(name: str) -> dict:
    return {"name": name, "type": "address"}


def _view(name: str, inputs: list, outputs: list) -> dict:
    return {
        "name": name,
        "type": "function",
        "stateMutability": "view",
        "inputs": inputs,
        "outputs": outputs,
    }


def _event(name: str, inputs: list) -> dict:
    return {"name": name, "type": "event", "anonymous": False, "inputs": inputs}


def _indexed(arg: dict) -> dict:
    return {**arg, "indexed": True}


def _plain(arg: dict) -> dict:
    return {**arg, "indexed": False}


def _side_indexes(name: str) -> dict:
    return {
        "name": name,
        "type": "tuple",
        "components": [_uint("poolIndex", 128), _uint("p2pIndex", 128)],
    }


def _side_delta(name: str) -> dict:
    return {
        "name": name,
        "type": "tuple",
        "components": [_uint("scaledDelta"), _uint("scaledP2PTotal")],
    }


_PAUSE_FLAGS = [
    "isP2PDisabled",
    "isSupplyPaused",
    "isSupplyCollateralPaused",
    "isBorrowPaused",
    "isWithdrawPaused",
    "isWithdrawCollateralPaused",
    "isRepayPaused",
    "isLiquidateCollateralPaused",
    "isLiquidateBorrowPaused",
    "isDeprecated",
]

MARKET_STRUCT = {
    "name": "",
    "type": "tuple",
    "components": [
        {
            "name": "indexes",
            "type": "tuple",
            "components": [_side_indexes("supply"), _side_indexes("borrow")],
        },
        {
            "name": "deltas",
            "type": "tuple",
            "components": [_side_delta("supply"), _side_delta("borrow")],
        },
        _address("underlying"),
        {
            "name": "pauseStatuses",
            "type": "tuple",
            "components": [{"name": flag, "type": "bool"} for flag in _PAUSE_FLAGS],
        },
        {"name": "isCollateral", "type": "bool"},
        _address("variableDebtToken"),
        _uint("lastUpdateTimestamp", 32),
        _uint("reserveFactor", 16),
        _uint("p2pIndexCursor", 16),
        _address("aToken"),
        _address("stableDebtToken"),
        _uint("idleSupply"),
    ],
}

_USER_BALANCE_INPUTS = [_address("underlying"), _address("user")]

MORPHO_AAVE_V3_ABI = [
    _view("marketsCreated", [], [{"name": "", "type": "address[]"}]),
    _view("market", [_address("underlying")], [MARKET_STRUCT]),
    _view("supplyBalance", _USER_BALANCE_INPUTS, [_uint("")]),
    _view("collateralBalance", _USER_BALANCE_INPUTS, [_uint("")]),
    _view("borrowBalance", _USER_BALANCE_INPUTS, [_uint("")]),
    _event(
        "Supplied",
        [
            _indexed(_address("from")),
            _indexed(_address("onBehalf")),
            _indexed(_address("underlying")),
            _plain(_uint("amount")),
            _plain(_uint("scaledOnPool")),
            _plain(_uint("scaledInP2P")),
        ],
    ),
    _event(
        "CollateralSupplied",
        [
            _indexed(_address("from")),
            _indexed(_address("onBehalf")),
            _indexed(_address("underlying")),
            _plain(_uint("amount")),
            _plain(_uint("scaledBalance")),
        ],
    ),
    _event(
        "Withdrawn",
        [
            _plain(_address("caller")),
            _indexed(_address("onBehalf")),
            _indexed(_address("receiver")),
            _indexed(_address("underlying")),
            _plain(_uint("amount")),
            _plain(_uint("scaledOnPool")),
            _plain(_uint("scaledInP2P")),
        ],
    ),
    _event(
        "CollateralWithdrawn",
        [
            _plain(_address("caller")),
            _indexed(_address("onBehalf")),
            _indexed(_address("receiver")),
            _indexed(_address("underlying")),
            _plain(_uint("amount")),
            _plain(_uint("scaledBalance")),
        ],
    ),
    _event(
        "Borrowed",
        [
            _plain(_address("caller")),
            _indexed(_address("onBehalf")),
            _indexed(_address("receiver")),
            _indexed(_address("underlying")),
            _plain(_uint("amount")),
            _plain(_uint("scaledOnPool")),
            _plain(_uint("scaledInP2P")),
        ],
    ),
    _event(
        "Repaid",
        [
            _indexed(_address("repayer")),
            _indexed(_address("onBehalf")),
            _indexed(_address("underlying")),
            _plain(_uint("amount")),
            _plain(_uint("scaledOnPool")),
            _plain(_uint("scaledInP2P")),
        ],
    ),
]

RESERVE_DATA_STRUCT = {
    "name": "",
    "type": "tuple",
    "components": [
        {"name": "configuration", "type": "tuple", "components": [_uint("data")]},
        _uint("liquidityIndex", 128),
        _uint("currentLiquidityRate", 128),
        _uint("variableBorrowIndex", 128),
        _uint("currentVariableBorrowRate", 128),
        _uint("currentStableBorrowRate", 128),
        _uint("lastUpdateTimestamp", 40),
        _uint("id", 16),
        _address("aTokenAddress"),
        _address("stableDebtTokenAddress"),
        _address("variableDebtTokenAddress"),
        _address("interestRateStrategyAddress"),
        _uint("accruedToTreasury", 128),
        _uint("unbacked", 128),
        _uint("isolationModeTotalDebt", 128),
    ],
}

AAVE_V3_POOL_ABI = [
    _view("getReserveData", [_address("asset")], [RESERVE_DATA_STRUCT]),
]

ATOKEN_ABI = ERC20_ABI + [
    _view("UNDERLYING_ASSET_ADDRESS", [], [_address("")]),
]
