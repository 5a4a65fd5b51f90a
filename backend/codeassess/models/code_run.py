"""Code execution request model"""

from pydantic import BaseModel
from typing import Optional


class CodeRunRequest(BaseModel):
    code: Optional[str] = None
    language_id: Optional[int] = None  # Judge0 language id, e.g. 71 for Python 3
    input: Optional[str] = None
