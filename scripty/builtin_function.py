from dataclasses import dataclass
from typing import Any, Optional


@dataclass(eq=False)
class BuiltinFunction:
    name: str
    arity: Optional[int]  # None: variadic, the function checks its own arguments
    fn: Any
    passes_env: bool = False  # call as fn(args, env) with the calling environment

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"
