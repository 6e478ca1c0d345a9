from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Dict, List, Optional


class Change(BaseModel):
    """One staged file change: the before/after snapshots of a path."""

    path: str
    before: Optional[str] = None
    after: Optional[str] = None
    status: str = "M"
    old_path: Optional[str] = None

    @property
    def suffix(self) -> str:
        name = self.path.rsplit("/", 1)[-1]
        return "." + name.rsplit(".", 1)[-1].lower() if "." in name else ""


class MethodDeclaration(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    signature: str
    start_line: int
    end_line: int
    owner: Optional[str] = None
    arity: Optional[int] = None


class CallGraph(BaseModel):
    """Declarations of one file and the in-file callees of each (one level)."""

    declarations: List[MethodDeclaration] = []
    calls: Dict[int, List[int]] = {}

    def callees(self, index: int) -> List[MethodDeclaration]:
        return [self.declarations[i] for i in self.calls.get(index, [])]


class GenerateRequest(BaseModel):
    model: str
    prompt: str


class GenerateChunk(BaseModel):
    response: str = ""
    done: bool = False
    error: Optional[str] = None


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    title: str
    message: str
    severity: Severity = Severity.INFO


class GenerationState(str, Enum):
    IDLE = "idle"
    BUSY = "busy"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
