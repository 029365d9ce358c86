"""Public package exports for the shader IR builder."""

from .arena import InstructionArena
from .config import BuilderConfig
from .control_flow import ControlFlowResolver
from .disassembler import IRDisassembler
from .emitter import IREmitter
from .errors import (
    CapacityError,
    InternalInconsistencyError,
    InvalidReferenceError,
    IRBuildError,
    UnbalancedControlFlowError,
    ValidationError,
)
from .instructions import (
    CondBranch,
    Constant,
    Construct,
    ElifBranch,
    EndMarker,
    GlobalBinding,
    Instruction,
    ListNode,
    Qualifier,
    Store,
    TypeDecl,
    TypeKind,
)
from .session import BuilderSession
from .validation import ValidationReport, validate_program

__all__ = [
    "InstructionArena",
    "BuilderConfig",
    "BuilderSession",
    "ControlFlowResolver",
    "IRDisassembler",
    "IREmitter",
    "IRBuildError",
    "CapacityError",
    "InternalInconsistencyError",
    "InvalidReferenceError",
    "UnbalancedControlFlowError",
    "ValidationError",
    "Instruction",
    "GlobalBinding",
    "TypeDecl",
    "Constant",
    "ListNode",
    "Construct",
    "Store",
    "CondBranch",
    "ElifBranch",
    "EndMarker",
    "Qualifier",
    "TypeKind",
    "ValidationReport",
    "validate_program",
]
