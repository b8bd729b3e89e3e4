from typing import Any


class Verifier:
    async def verify(self, evidence: Any) -> Any:
        raise NotImplementedError
