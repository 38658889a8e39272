from typing import Any, Dict, Optional

from scripty.errors import ScriptRuntimeError


class Environment:
    """Represents a scope frame mapping identifiers to values, chained to its parent.

    There is no declaration keyword: the first assignment to a name declares
    it. `set` rebinds the name in the nearest frame that already owns it and
    otherwise creates it in this frame.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def __contains__(self, name: str) -> bool:
        return self.resolve(name) is not None

    def resolve(self, name: str) -> Optional['Environment']:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def get(self, name: str) -> Any:
        if name in self.values:
            return self.values[name]
        if self.parent:
            return self.parent.get(name)
        raise ScriptRuntimeError('NameError', f'undefined variable {name}')

    def set(self, name: str, value: Any):
        owner = self.resolve(name)
        if owner is None:
            owner = self
        owner.values[name] = value

    def define(self, name: str, value: Any):
        self.values[name] = value

    def depth(self) -> int:
        depth = 0
        env = self.parent
        while env is not None:
            depth += 1
            env = env.parent
        return depth
