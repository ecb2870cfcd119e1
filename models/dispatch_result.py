from typing import Optional, Tuple

from pydantic import BaseModel

from errors import http_error_body


class ExecutionResult(BaseModel):
    command: str
    output: bytes = b""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class DispatchResult(BaseModel):
    """
    Outcome of one dispatch: the matched rule name (None when nothing matched)
    and one ExecutionResult per command, in execution order.
    """
    matched: Optional[str] = None
    results: Tuple[ExecutionResult, ...] = ()

    @property
    def failed(self) -> Tuple[ExecutionResult, ...]:
        return tuple(result for result in self.results if not result.ok)

    @property
    def status_code(self) -> int:
        return 500 if self.failed else 200

    def render(self) -> bytes:
        """
        Output of successful commands and an error block per failed command, in execution order.
        """
        body = bytearray()
        for result in self.results:
            if result.ok:
                body += result.output
            else:
                body += http_error_body(500, result.error).encode()
        return bytes(body)
