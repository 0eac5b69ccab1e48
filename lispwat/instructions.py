"""
lispwat Instruction Model

Value objects for every fragment of WebAssembly text the emitter writes.
Each one renders itself with str(); none of them hold state beyond their
operands. Only i32 values are supported.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Union


# =============================================================================
# Types
# =============================================================================

@dataclass(frozen=True)
class I32Param:
    """Function parameter slot, named $p<index>."""
    index: int
    
    def __str__(self) -> str:
        return f"(param $p{self.index} i32)"


@dataclass(frozen=True)
class I32Result:
    """Function result type."""
    
    def __str__(self) -> str:
        return "(result i32)"


# =============================================================================
# Opcodes
# =============================================================================

@dataclass(frozen=True)
class Const:
    """Push a constant on the stack."""
    value: int
    
    def __str__(self) -> str:
        return f"(i32.const {self.value})"


@dataclass(frozen=True)
class GetLocal:
    """Push a function parameter on the stack."""
    index: int
    
    def __str__(self) -> str:
        return f"(get_local $p{self.index})"


@dataclass(frozen=True)
class Add:
    """Open an i32 add. The caller closes it with CLOSE after the operands."""
    
    def __str__(self) -> str:
        return "(i32.add"


@dataclass(frozen=True)
class Subtract:
    """Open an i32 subtract. The caller closes it with CLOSE after the operands."""
    
    def __str__(self) -> str:
        return "(i32.sub"


@dataclass(frozen=True)
class Load:
    """Load 4 bytes from linear memory as an i32."""
    address: int
    
    def __str__(self) -> str:
        return f"(i32.load {Const(self.address)})"


@dataclass(frozen=True)
class Store:
    """Store an i32 into linear memory."""
    address: int
    value: int
    
    def __str__(self) -> str:
        return f"(i32.store {Const(self.address)} {Const(self.value)})"


@dataclass(frozen=True)
class Drop:
    """Discard the top of the stack."""
    
    def __str__(self) -> str:
        return "drop"


CLOSE = ")"

Operand = Union[Const, GetLocal, Load]


# =============================================================================
# Host imports and calls
# =============================================================================

class WasiImport(Enum):
    """Host functions the module can import."""
    
    FD_WRITE = "fd_write"
    
    def __str__(self) -> str:
        if self is WasiImport.FD_WRITE:
            return (f'(import "wasi_unstable" "fd_write" '
                    f'(func $fd_write (param i32 i32 i32 i32) {I32Result()}))')
        raise ValueError(f"Unknown import: {self.value}")


@dataclass(frozen=True)
class FdWrite:
    """
    Call the host write syscall.
    
    Args:
        file_descriptor: 1 for standard output
        iovs: address of the I/O-vector array
        iovs_len: number of I/O vectors
        nwritten: address where the host stores the byte count
    """
    file_descriptor: Operand
    iovs: Operand
    iovs_len: Operand
    nwritten: Operand
    
    def __str__(self) -> str:
        return (f"(call $fd_write {self.file_descriptor} {self.iovs} "
                f"{self.iovs_len} {self.nwritten})")


# =============================================================================
# Data segments
# =============================================================================

_NAMED_ESCAPES = {
    0x09: "\\t",
    0x0A: "\\n",
    0x22: '\\"',
    0x5C: "\\\\",
}


def escape_data(data: bytes) -> str:
    """Render bytes as the body of a WAT string literal."""
    out = []
    for byte in data:
        if byte in _NAMED_ESCAPES:
            out.append(_NAMED_ESCAPES[byte])
        elif 0x20 <= byte < 0x7F:
            out.append(chr(byte))
        else:
            out.append(f"\\{byte:02x}")
    return "".join(out)


@dataclass(frozen=True)
class OpData:
    """Bytes preloaded into linear memory at a constant offset."""
    location: Const
    data: bytes
    
    @property
    def offset(self) -> int:
        return self.location.value
    
    def __len__(self) -> int:
        return len(self.data)
    
    def __str__(self) -> str:
        return f'(data {self.location} "{escape_data(self.data)}")'
