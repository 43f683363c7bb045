from src.px_common.errors import StrategyProtocolFeeTooHighError


def check_fee_caps(protocol_fee_bp: int, max_protocol_fee_bp: int, ceiling_bp: int) -> None:
    """Raise unless 0 <= protocol_fee_bp <= max_protocol_fee_bp <= ceiling_bp."""
    if max_protocol_fee_bp > ceiling_bp:
        raise StrategyProtocolFeeTooHighError(max_protocol_fee_bp, ceiling_bp)
    if protocol_fee_bp > max_protocol_fee_bp:
        raise StrategyProtocolFeeTooHighError(protocol_fee_bp, max_protocol_fee_bp)
    if protocol_fee_bp < 0:
        raise StrategyProtocolFeeTooHighError(protocol_fee_bp, max_protocol_fee_bp)
