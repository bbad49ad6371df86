import time

def current_timestamp() -> int:
    """Wall-clock time in whole seconds"""
    return int(time.time())

def to_bytes32(value) -> bytes:
    """Parse a 0x-prefixed (or bare) hex string into exactly 32 bytes"""
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        text = value[2:] if value.startswith(('0x', '0X')) else value
        raw = bytes.fromhex(text)
    if len(raw) != 32:
        raise ValueError(f"Expected 32 bytes, got {len(raw)}: {value!r}")
    return raw

def to_hex_bytes(value: str) -> bytes:
    """Parse arbitrary-length hex calldata, '0x' or '' meaning empty"""
    text = value[2:] if value.startswith(('0x', '0X')) else value
    return bytes.fromhex(text)
