from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Union
from typing_extensions import TypeAlias, TypeGuard

from .tree import BlockStatement

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

def wrap_int64(value: int) -> int:
    """Two's-complement wraparound into the signed 64-bit range."""
    return (value - INT64_MIN) % 2**64 + INT64_MIN

# ---------- Value Model ----------

@dataclass(frozen=True)
class SlInteger:
    value: int
    kind = "INTEGER"

    def __post_init__(self) -> None:
        if not INT64_MIN <= self.value <= INT64_MAX:
            object.__setattr__(self, "value", wrap_int64(self.value))

    def inspect(self) -> str:
        return str(self.value)

@dataclass(frozen=True)
class SlBool:
    value: bool
    kind = "BOOLEAN"

    def inspect(self) -> str:
        return "true" if self.value else "false"

TRUE = SlBool(True)
FALSE = SlBool(False)

def native_bool(value: bool) -> SlBool:
    return TRUE if value else FALSE

def is_true(value: SlValue) -> bool:
    return isinstance(value, SlBool) and value.value

def is_false(value: SlValue) -> bool:
    return isinstance(value, SlBool) and not value.value

@dataclass(frozen=True)
class SlString:
    value: str
    kind = "STRING"

    def inspect(self) -> str:
        return f'"{self.value}"'

@dataclass(eq=False)
class SlFn:
    params: Tuple[str, ...]
    body: BlockStatement          # AST node
    env: 'Environment'            # Closure environment, shared by reference
    name: Optional[str] = None
    kind = "FUNCTION"

    def inspect(self) -> str:
        label = f"fn {self.name}" if self.name else "fn"
        return f"{label}({', '.join(self.params)}) {self.body}"

    def __repr__(self) -> str:
        return f"<{self.name or 'anonymous'} fn params={', '.join(self.params) or 'nullary'}>"

@dataclass(frozen=True)
class SlReturn:
    """Wraps the value of a `return` while it unwinds enclosing blocks."""
    value: SlValue
    kind = "RETURN"

    def inspect(self) -> str:
        return self.value.inspect()

@dataclass(frozen=True)
class SlError:
    message: str
    kind = "ERROR"

    def inspect(self) -> str:
        return f"error: {self.message}"

class SlNoValue:
    """Result of a construct that computes nothing (e.g. `if false { 1 }`)."""
    kind = "NO_VALUE"
    _instance: Optional[SlNoValue] = None

    def __new__(cls) -> SlNoValue:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def inspect(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "NO_VALUE"

NO_VALUE = SlNoValue()

SlValue: TypeAlias = Union[
    SlInteger,
    SlBool,
    SlString,
    SlFn,
    SlReturn,
    SlError,
    SlNoValue,
]

def is_error(value: SlValue) -> TypeGuard[SlError]:
    return isinstance(value, SlError)

def is_signal(value: SlValue) -> TypeGuard[Union[SlReturn, SlError]]:
    """Return and Error values stop block evaluation and propagate outward."""
    return isinstance(value, (SlReturn, SlError))

def new_error(fmt: str, *args: object) -> SlError:
    return SlError(fmt % args if args else fmt)

# ---------- Environment ----------

class Environment:
    """Name bindings plus a reference (never a copy) to the enclosing scope."""

    def __init__(self, parent: Optional[Environment] = None):
        self.parent = parent
        self.vars: Dict[str, SlValue] = {}

    def define(self, name: str, val: SlValue) -> SlValue:
        """Bind in this scope, shadowing any outer binding."""
        self.vars[name] = val
        return val

    def lookup(self, name: str) -> Optional[SlValue]:
        """Walk outward; None means unresolved at every level."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.vars:
                return env.vars[name]
            env = env.parent
        return None

    def enclosed(self) -> Environment:
        return Environment(parent=self)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def names(self) -> List[str]:
        seen: Dict[str, None] = {}
        for env in self.chain():
            for name in env.vars:
                seen.setdefault(name)
        return sorted(seen)

    def chain(self) -> Iterator[Environment]:
        env: Optional[Environment] = self
        while env is not None:
            yield env
            env = env.parent

    def __repr__(self) -> str:
        return f"<Environment depth={sum(1 for _ in self.chain())} names={sorted(self.vars)}>"

# ---------- Limits ----------

@dataclass(frozen=True)
class EvalLimits:
    """Optional hardening; neither limit changes results of programs that stay within it."""
    max_call_depth: Optional[int] = None
    max_steps: Optional[int] = None

# ---------- Exceptions ----------

class InitError(Exception):
    """A runner could not be built: no program, or the source did not parse."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors: List[str] = list(errors) if errors else []

class ParseError(InitError):
    def __init__(self, errors: List[str]):
        if len(errors) == 1:
            summary = errors[0]
        else:
            summary = f"{len(errors)} parse errors"
        super().__init__(summary, errors)

    def __str__(self) -> str:
        return "\n".join(self.errors) or super().__str__()
